"""Pytest configuration and shared fixtures for the cooldown analyzer tests."""

import pytest

from analysis.abilities import BERSERKING, BLOOD_FURY
from analysis.base import BaseAnalyzer
from analysis.cooldowns import CooldownSpellDefinition, CooldownThroughputTracker
from analysis.dispatch import ModuleDispatcher, Player
from analysis.events import CombatEvent

PLAYER_ID = 1
PET_ID = 2
BOSS_ID = 100


def raw_event(
    timestamp,
    type="damage",
    source=PLAYER_ID,
    target=BOSS_ID,
    ability=1,
    amount=None,
    **extra,
):
    event = {
        "timestamp": timestamp,
        "type": type,
        "sourceID": source,
        "targetID": target,
        "abilityGameID": ability,
        "ability": f"Ability {ability}",
    }
    if amount is not None:
        event["amount"] = amount
    event.update(extra)
    return event


def make_event(*args, **kwargs) -> CombatEvent:
    return CombatEvent.model_validate(raw_event(*args, **kwargs))


class RecordingModule(BaseAnalyzer):
    """Records every handler call as (handler name, timestamp)"""

    def __init__(self):
        self.calls = []

    def on_cast_by_player(self, event):
        self.calls.append(("on_cast_by_player", event.timestamp))

    def on_damage_by_player(self, event):
        self.calls.append(("on_damage_by_player", event.timestamp))

    def on_damage_by_player_pet(self, event):
        self.calls.append(("on_damage_by_player_pet", event.timestamp))

    def on_buff_apply_to_player(self, event):
        self.calls.append(("on_buff_apply_to_player", event.timestamp))


@pytest.fixture
def player() -> Player:
    return Player(PLAYER_ID, "Testlock", pets=[PET_ID])


@pytest.fixture
def dispatcher(player) -> ModuleDispatcher:
    return ModuleDispatcher(player)


@pytest.fixture
def definitions():
    """Berserking lasts 25s and Blood Fury 5s in these tests"""
    return (
        CooldownSpellDefinition(BERSERKING, duration=25),
        CooldownSpellDefinition(BLOOD_FURY, duration=5),
    )


@pytest.fixture
def tracker(dispatcher, definitions) -> CooldownThroughputTracker:
    return dispatcher.register(CooldownThroughputTracker(definitions))
