"""Unit tests for event validation and the event sequence."""

import pytest
from pydantic import ValidationError

from analysis.events import CombatEvent, EventSequence, EventType, parse_event
from conftest import PLAYER_ID, raw_event


class TestCombatEvent:
    """Test suite for CombatEvent validation."""

    def test_reads_warcraft_logs_field_names(self) -> None:
        event = CombatEvent.model_validate(
            raw_event(1500, "damage", ability=172, amount=300, sourceIsPet=True)
        )
        assert event.timestamp == 1500
        assert event.type is EventType.DAMAGE
        assert event.source_id == PLAYER_ID
        assert event.ability_id == 172
        assert event.ability_name == "Ability 172"
        assert event.amount == 300
        assert event.source_is_pet is True

    def test_unknown_type_becomes_other(self) -> None:
        event = CombatEvent.model_validate(raw_event(0, "absorbed"))
        assert event.type is EventType.OTHER

    def test_resource_change_amount(self) -> None:
        event = CombatEvent.model_validate(
            raw_event(0, "resourcechange", resourceChange=20, waste=5)
        )
        assert event.amount == 20
        assert event.waste == 5

    def test_is_frozen(self) -> None:
        event = CombatEvent.model_validate(raw_event(0))
        with pytest.raises(ValidationError):
            event.timestamp = 10

    def test_missing_required_field(self) -> None:
        raw = raw_event(0)
        del raw["sourceID"]
        assert parse_event(raw) is None

    def test_negative_timestamp(self) -> None:
        assert parse_event(raw_event(-1)) is None

    def test_not_a_dict(self) -> None:
        assert parse_event("cast") is None


class TestEventSequence:
    """Test suite for EventSequence."""

    def test_keeps_input_order(self) -> None:
        sequence = EventSequence([raw_event(0), raw_event(0), raw_event(10)])
        assert [event.timestamp for event in sequence] == [0, 0, 10]
        assert len(sequence) == 3
        assert sequence.skipped == 0

    def test_skips_malformed_events(self) -> None:
        broken = raw_event(5)
        del broken["timestamp"]
        sequence = EventSequence([raw_event(0), broken, raw_event(10)])
        assert [event.timestamp for event in sequence] == [0, 10]
        assert sequence.skipped == 1

    def test_skips_out_of_order_events(self) -> None:
        sequence = EventSequence([raw_event(0), raw_event(20), raw_event(10)])
        assert [event.timestamp for event in sequence] == [0, 20]
        assert sequence.skipped == 1

    def test_logs_skipped_events(self, caplog) -> None:
        EventSequence([{"type": "cast"}])
        assert "malformed" in caplog.text
