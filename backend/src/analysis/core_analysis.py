from collections import defaultdict

from analysis.abilities import (
    ABILITIES,
    BERSERKING,
    BLOOD_FURY,
    POTION_OF_PROLONGED_POWER,
)
from analysis.base import BaseAnalyzer
from analysis.cooldowns import (
    CooldownSpellDefinition,
    CooldownThroughputTracker,
    WindowTrigger,
)
from analysis.events import CombatEvent
from report import Fight


class CastEfficiencyAnalyzer(BaseAnalyzer):
    def __init__(self, fight_duration, definitions, catalog=ABILITIES):
        self._fight_duration = fight_duration
        self._catalog = catalog
        self._cast_cooldowns = [
            definition
            for definition in definitions
            if definition.trigger in (WindowTrigger.CAST, WindowTrigger.GRANT)
        ]
        self._casts = defaultdict(int)

    def on_cast_by_player(self, event: CombatEvent):
        self._casts[event.ability_id] += 1

    def num_casts(self, ability_id):
        return self._casts[ability_id]

    def possible_casts(self, ability_id):
        ability = self._catalog.get(ability_id)
        if ability is None or not ability.cooldown:
            return self._casts[ability_id]
        return max(
            1 + (self._fight_duration - 5000) // ability.cooldown,
            self._casts[ability_id],
        )

    def report(self):
        return {
            "cast_efficiency": [
                {
                    "ability_id": definition.ability_id,
                    "name": definition.name,
                    "num_actual": self._casts[definition.ability_id],
                    "num_possible": self.possible_casts(definition.ability_id),
                }
                for definition in self._cast_cooldowns
            ],
            "num_casts": sum(self._casts.values()),
        }


class ResourceAnalyzer(BaseAnalyzer):
    def __init__(self):
        self._count_gained = 0
        self._sum_gained = 0
        self._count_wasted = 0
        self._sum_wasted = 0

    def on_resource_change_to_player(self, event: CombatEvent):
        if event.amount:
            self._count_gained += 1
            self._sum_gained += event.amount
        if event.waste:
            self._count_wasted += 1
            self._sum_wasted += event.waste

    def report(self):
        return {
            "resources": {
                "gained_times": self._count_gained,
                "gained_sum": self._sum_gained,
                "overcap_times": self._count_wasted,
                "overcap_sum": self._sum_wasted,
            }
        }


class DeathAnalyzer(BaseAnalyzer):
    def __init__(self):
        self._deaths = []

    def on_death_to_player(self, event: CombatEvent):
        self._deaths.append(event.timestamp)

    def report(self):
        return {
            "deaths": {
                "num_deaths": len(self._deaths),
                "timestamps": list(self._deaths),
            }
        }


CORE_COOLDOWNS = (
    CooldownSpellDefinition(BERSERKING, duration=10),
    CooldownSpellDefinition(BLOOD_FURY, duration=15),
    CooldownSpellDefinition(POTION_OF_PROLONGED_POWER, duration=60),
)


class CoreAnalysisConfig:
    cooldown_tracker_class = CooldownThroughputTracker

    def cooldown_definitions(self):
        return CORE_COOLDOWNS

    def create_cooldown_tracker(self, debug=False):
        return self.cooldown_tracker_class(self.cooldown_definitions(), debug=debug)

    def get_analyzers(self, fight: Fight, settings):
        cooldown_tracker = self.create_cooldown_tracker(settings.debug)
        return [
            cooldown_tracker,
            CastEfficiencyAnalyzer(fight.duration, cooldown_tracker.definitions),
            ResourceAnalyzer(),
            DeathAnalyzer(),
        ]
