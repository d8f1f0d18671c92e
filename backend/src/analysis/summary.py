from enum import Enum
from typing import Dict

from analysis.events import EventType


class SummaryKind(str, Enum):
    DAMAGE = "damage"
    HEALING = "healing"
    OVERHEALING = "overhealing"
    ABSORBED = "absorbed"


def _sum_field(events, event_types, field):
    return sum(
        getattr(event, field) or 0 for event in events if event.type in event_types
    )


_SUMMARIZERS = {
    SummaryKind.DAMAGE: lambda events: _sum_field(
        events, (EventType.DAMAGE,), "amount"
    ),
    SummaryKind.HEALING: lambda events: _sum_field(events, (EventType.HEAL,), "amount"),
    SummaryKind.OVERHEALING: lambda events: _sum_field(
        events, (EventType.HEAL,), "overheal"
    ),
    SummaryKind.ABSORBED: lambda events: _sum_field(
        events, (EventType.DAMAGE, EventType.HEAL), "absorbed"
    ),
}


def summarize_window(window) -> Dict[str, float]:
    events = window.events
    return {
        kind.value: _SUMMARIZERS[kind](events)
        for kind in sorted(window.definition.summary_kinds, key=lambda k: k.value)
    }


class CooldownSummaryAggregator:
    """
    Read-only view over a tracker's closed windows. Summaries are recomputed
    on every call, active windows are never read.
    """

    def __init__(self, tracker):
        self._tracker = tracker

    def summaries(self, ability_id):
        return [
            summarize_window(window) for window in self._tracker.windows_for(ability_id)
        ]

    def total(self, ability_id, kind: SummaryKind):
        return sum(summary.get(kind.value, 0) for summary in self.summaries(ability_id))

    def report(self):
        cooldowns = []
        for definition in self._tracker.definitions:
            windows = self._tracker.windows_for(definition.ability_id)
            cooldowns.append(
                {
                    "ability_id": definition.ability_id,
                    "name": definition.name,
                    "num_windows": len(windows),
                    "windows": [
                        {
                            "start": window.start,
                            "end": window.end,
                            "num_events": len(window.events),
                            "summary": summarize_window(window),
                        }
                        for window in windows
                    ],
                }
            )
        return cooldowns
