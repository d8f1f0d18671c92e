"""Unit tests for window summaries."""

from analysis.abilities import BERSERKING, BLOOD_FURY
from analysis.cooldowns import (
    CooldownSpellDefinition,
    CooldownThroughputTracker,
    CooldownWindow,
)
from analysis.summary import CooldownSummaryAggregator, SummaryKind, summarize_window
from conftest import make_event


def window_with(events, summary_kinds):
    definition = CooldownSpellDefinition(BERSERKING, 10, summary_kinds=summary_kinds)
    window = CooldownWindow(definition, 0, 10000)
    for event in events:
        window.add_event(event)
    return window


class TestSummarizeWindow:
    """Test suite for summarize_window."""

    def test_damage_only_counts_damage(self) -> None:
        window = window_with(
            [
                make_event(1, "damage", amount=100),
                make_event(2, "heal", amount=40),
                make_event(3, "damage", amount=50),
            ],
            [SummaryKind.DAMAGE],
        )
        assert summarize_window(window) == {"damage": 150}

    def test_healing_kinds(self) -> None:
        window = window_with(
            [
                make_event(1, "heal", amount=40, overheal=10, absorbed=5),
                make_event(2, "heal", amount=60),
                make_event(3, "damage", amount=500, absorbed=20),
            ],
            [SummaryKind.HEALING, SummaryKind.OVERHEALING, SummaryKind.ABSORBED],
        )
        assert summarize_window(window) == {
            "absorbed": 25,
            "healing": 100,
            "overhealing": 10,
        }

    def test_empty_window(self) -> None:
        window = window_with([], [SummaryKind.DAMAGE])
        assert summarize_window(window) == {"damage": 0}


class TestCooldownSummaryAggregator:
    """Test suite for CooldownSummaryAggregator."""

    def test_only_reads_history(self, dispatcher, tracker) -> None:
        berserking = BERSERKING.ability_id
        for event in (
            make_event(0, "cast", ability=berserking),
            make_event(1000, amount=10),
            make_event(26000, "cast", ability=berserking),
            make_event(27000, amount=99),
        ):
            dispatcher.dispatch(event)

        aggregator = CooldownSummaryAggregator(tracker)
        assert aggregator.summaries(berserking) == [{"damage": 10}]
        assert aggregator.total(berserking, SummaryKind.DAMAGE) == 10

    def test_report_lists_every_tracked_ability(self, dispatcher) -> None:
        tracker = dispatcher.register(
            CooldownThroughputTracker(
                [
                    CooldownSpellDefinition(BERSERKING, 10),
                    CooldownSpellDefinition(BLOOD_FURY, 15),
                ]
            )
        )
        dispatcher.dispatch(make_event(0, "cast", ability=BLOOD_FURY.ability_id))
        dispatcher.dispatch(make_event(500, amount=42))
        dispatcher.finish(20000)

        assert tracker.report() == {
            "cooldowns": [
                {
                    "ability_id": BERSERKING.ability_id,
                    "name": "Berserking",
                    "num_windows": 0,
                    "windows": [],
                },
                {
                    "ability_id": BLOOD_FURY.ability_id,
                    "name": "Blood Fury",
                    "num_windows": 1,
                    "windows": [
                        {
                            "start": 0,
                            "end": 15000,
                            "num_events": 1,
                            "summary": {"damage": 42},
                        }
                    ],
                },
            ]
        }
