import logging
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    CAST = "cast"
    BEGIN_CAST = "begincast"
    DAMAGE = "damage"
    HEAL = "heal"
    APPLY_BUFF = "applybuff"
    REMOVE_BUFF = "removebuff"
    REFRESH_BUFF = "refreshbuff"
    APPLY_DEBUFF = "applydebuff"
    REMOVE_DEBUFF = "removedebuff"
    DEATH = "death"
    RESOURCE_CHANGE = "resourcechange"
    ENERGIZE = "energize"
    SUMMON = "summon"
    OTHER = "other"


_KNOWN_TYPES = {event_type.value for event_type in EventType}


class CombatEvent(BaseModel):
    """A single Warcraft Logs event, validated and frozen"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    timestamp: int
    type: EventType
    source_id: int = Field(alias="sourceID")
    target_id: Optional[int] = Field(default=None, alias="targetID")
    ability_id: int = Field(alias="abilityGameID")
    ability_name: str = Field(default="", alias="ability")
    amount: Optional[float] = None
    overheal: Optional[float] = None
    absorbed: Optional[float] = None
    waste: Optional[float] = None
    source_is_pet: bool = Field(default=False, alias="sourceIsPet")
    source_owner_id: Optional[int] = Field(default=None, alias="sourceOwnerID")

    @model_validator(mode="before")
    @classmethod
    def _resource_change_amount(cls, data):
        # resourcechange events carry their amount as resourceChange
        if isinstance(data, dict) and "amount" not in data and "resourceChange" in data:
            data = {**data, "amount": data["resourceChange"]}
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value):
        if isinstance(value, EventType):
            return value
        if isinstance(value, str) and value not in _KNOWN_TYPES:
            return EventType.OTHER
        return value

    @field_validator("timestamp")
    @classmethod
    def _non_negative(cls, value):
        if value < 0:
            raise ValueError("timestamp must not be negative")
        return value


def parse_event(raw: Any) -> Optional[CombatEvent]:
    try:
        return CombatEvent.model_validate(raw)
    except ValidationError as e:
        logger.warning(
            "Skipping malformed event at %s: %s",
            raw.get("timestamp") if isinstance(raw, dict) else None,
            e.errors(include_url=False),
        )
        return None


class EventSequence:
    """
    Ordered, immutable sequence of CombatEvents built from raw event dicts.

    Malformed events and events that would move time backwards are skipped
    and counted in `skipped`. Valid events rejected by `include` are dropped
    silently.
    """

    def __init__(self, raw_events: Iterable[Any], include=None):
        self._events: List[CombatEvent] = []
        self.skipped = 0

        last_timestamp = None
        for raw in raw_events:
            event = parse_event(raw)
            if event is None:
                self.skipped += 1
                continue

            if last_timestamp is not None and event.timestamp < last_timestamp:
                logger.warning(
                    "Skipping out of order event at %s (previous event at %s)",
                    event.timestamp,
                    last_timestamp,
                )
                self.skipped += 1
                continue

            last_timestamp = event.timestamp
            if include is not None and not include(event):
                continue
            self._events.append(event)

    def __iter__(self) -> Iterator[CombatEvent]:
        return iter(self._events)

    def __len__(self):
        return len(self._events)

    def __getitem__(self, index):
        return self._events[index]
