import logging
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple

from analysis.abilities import ABILITIES, Ability, AbilityCatalog
from analysis.base import BaseAnalyzer, Window
from analysis.errors import ConfigurationError, WindowClosedError
from analysis.events import CombatEvent
from analysis.summary import CooldownSummaryAggregator, SummaryKind

logger = logging.getLogger(__name__)


class WindowTrigger(Enum):
    CAST = "cast"
    GRANT = "grant"
    BUFF = "buff"


class CooldownSpellDefinition:
    def __init__(
        self,
        ability: Ability,
        duration: Optional[int] = None,
        summary_kinds: Iterable[SummaryKind] = (SummaryKind.DAMAGE,),
        trigger: WindowTrigger = WindowTrigger.CAST,
        allow_overlap=False,
    ):
        self.ability_id = ability.ability_id
        self.name = ability.name
        # duration is in seconds, None when an external signal closes the window
        self.expected_duration_ms = duration * 1000 if duration is not None else None
        self.summary_kinds: FrozenSet[SummaryKind] = frozenset(summary_kinds)
        self.trigger = trigger
        self.allow_overlap = allow_overlap

    def __repr__(self):
        return (
            f"CooldownSpellDefinition({self.name!r}, {self.ability_id}, "
            f"{self.expected_duration_ms}, {self.trigger.value})"
        )


def merge_definitions(*definition_lists) -> Tuple[CooldownSpellDefinition, ...]:
    """Combine a base list of definitions with spec-specific additions"""
    merged = []
    seen = {}

    for definitions in definition_lists:
        for definition in definitions:
            if definition.ability_id in seen:
                raise ConfigurationError(
                    f"{definition.name} ({definition.ability_id}) is defined more "
                    f"than once: {seen[definition.ability_id]!r} and {definition!r}"
                )
            if (
                definition.trigger in (WindowTrigger.CAST, WindowTrigger.GRANT)
                and definition.expected_duration_ms is None
            ):
                raise ConfigurationError(
                    f"{definition.name} is {definition.trigger.value}-triggered "
                    "and needs a duration"
                )
            seen[definition.ability_id] = definition
            merged.append(definition)

    return tuple(merged)


class CooldownWindow(Window):
    def __init__(self, definition: CooldownSpellDefinition, start, end=None):
        super().__init__(start, end)
        self.definition = definition
        self.closed = False
        self._events: List[CombatEvent] = []

    @property
    def ability_id(self):
        return self.definition.ability_id

    @property
    def events(self):
        return tuple(self._events)

    def add_event(self, event: CombatEvent):
        if self.closed:
            raise WindowClosedError(f"{self!r} is already closed")
        # the same event can't be delivered twice in a row
        if self._events and self._events[-1] is event:
            return False
        self._events.append(event)
        return True

    def close(self, end):
        if self.closed:
            raise WindowClosedError(f"{self!r} is already closed")
        self.end = max(end, self.start)
        self.closed = True

    def __repr__(self):
        return f"CooldownWindow({self.definition.name!r}, {self.start}, {self.end})"


class CooldownThroughputTracker(BaseAnalyzer):
    """
    Tracks the windows opened by cooldown usage and collects the player's
    (and their pets') damage and healing done inside each of them.

    Windows are closed lazily: an expired window is only moved to history
    when the next damage, heal or cast arrives at or after its end.
    """

    def __init__(
        self,
        definitions: Iterable[CooldownSpellDefinition],
        catalog: AbilityCatalog = ABILITIES,
        logger=logger,
        debug=False,
    ):
        self._definitions = merge_definitions(definitions)
        self._definitions_by_id = {d.ability_id: d for d in self._definitions}
        self._catalog = catalog
        self._logger = logger
        # log every window opening and closing
        self._debug = debug
        self._active: List[CooldownWindow] = []
        self._history: List[CooldownWindow] = []

    @property
    def definitions(self):
        return self._definitions

    @property
    def active(self):
        return tuple(self._active)

    @property
    def history(self):
        return tuple(self._history)

    def windows_for(self, ability_id):
        return [window for window in self._history if window.ability_id == ability_id]

    def validate(self):
        unknown = [d for d in self._definitions if d.ability_id not in self._catalog]
        if unknown:
            raise ConfigurationError(
                "Unknown cooldown abilities: "
                + ", ".join(f"{d.name} ({d.ability_id})" for d in unknown)
            )

    def get_definition(self, ability_id):
        return self._definitions_by_id.get(ability_id)

    def on_cast_by_player(self, event: CombatEvent):
        self._evict(event.timestamp)

        definition = self.get_definition(event.ability_id)
        if (
            definition
            and definition.trigger is WindowTrigger.CAST
            and definition.expected_duration_ms is not None
        ):
            self._open(definition, event.timestamp)

    def grant_window(self, ability_id, timestamp):
        definition = self.get_definition(ability_id)
        if definition is None or definition.trigger is not WindowTrigger.GRANT:
            raise ConfigurationError(f"{ability_id} is not a granted cooldown")

        return self._grant(definition, timestamp)

    def close_window(self, ability_id, timestamp):
        self._evict(timestamp)

        closed = [window for window in self._active if window.ability_id == ability_id]
        for window in closed:
            self._close(window, timestamp)
        return closed

    def on_damage_by_player(self, event: CombatEvent):
        self.track_event(event)

    def on_damage_by_player_pet(self, event: CombatEvent):
        self.track_event(event)

    def on_heal_by_player(self, event: CombatEvent):
        self.track_event(event)

    def on_heal_by_player_pet(self, event: CombatEvent):
        self.track_event(event)

    def track_event(self, event: CombatEvent):
        self._evict(event.timestamp)

        for window in self._active:
            if window.contains(event.timestamp):
                window.add_event(event)

    def finish(self, end_time):
        for window in sorted(self._active, key=lambda w: (w.start, w.ability_id)):
            end = end_time if window.end is None else min(window.end, end_time)
            self._close(window, end)

    def _grant(self, definition, timestamp):
        self._evict(timestamp)
        return self._open(definition, timestamp)

    def _open(self, definition, timestamp):
        if not definition.allow_overlap:
            for window in list(self._active):
                if window.ability_id == definition.ability_id:
                    self._close(window, timestamp)

        end = (
            timestamp + definition.expected_duration_ms
            if definition.expected_duration_ms is not None
            else None
        )
        window = CooldownWindow(definition, timestamp, end)
        self._active.append(window)
        if self._debug:
            self._logger.debug("Cooldown started: %s", window)
        return window

    def _evict(self, timestamp):
        expired = [
            window
            for window in self._active
            if window.end is not None and window.end <= timestamp
        ]
        for window in sorted(expired, key=lambda w: (w.end, w.start)):
            self._close(window, window.end)

    def _close(self, window, end):
        self._active.remove(window)
        window.close(end)
        self._history.append(window)
        if self._debug:
            self._logger.debug("Cooldown ended: %s", window)

    def summaries(self):
        return CooldownSummaryAggregator(self)

    def report(self):
        return {
            "cooldowns": self.summaries().report(),
        }


class BuffCooldownTracker(CooldownThroughputTracker):
    """Also opens windows on buff application and closes them on removal"""

    def on_buff_apply_to_player(self, event: CombatEvent):
        definition = self.get_definition(event.ability_id)
        if definition is None or definition.trigger is not WindowTrigger.BUFF:
            return

        self._evict(event.timestamp)
        self._open(definition, event.timestamp)

    def on_buff_remove_to_player(self, event: CombatEvent):
        definition = self.get_definition(event.ability_id)
        if definition is None or definition.trigger is not WindowTrigger.BUFF:
            return

        self.close_window(event.ability_id, event.timestamp)
