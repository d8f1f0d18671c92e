from analysis.abilities import (
    GRIMOIRE_FELHUNTER,
    GRIMOIRE_IMP,
    GRIMOIRE_SUCCUBUS,
    GRIMOIRE_VOIDWALKER,
    SOUL_HARVEST,
    SUMMON_DOOMGUARD,
    SUMMON_INFERNAL,
)
from analysis.cooldowns import (
    BuffCooldownTracker,
    CooldownSpellDefinition,
    WindowTrigger,
    merge_definitions,
)
from analysis.core_analysis import CoreAnalysisConfig
from analysis.events import CombatEvent
from analysis.summary import SummaryKind


def _summon(ability):
    return CooldownSpellDefinition(
        ability,
        duration=25,
        summary_kinds=(SummaryKind.DAMAGE,),
        trigger=WindowTrigger.GRANT,
        # every summon is its own pet, so windows may overlap
        allow_overlap=True,
    )


AFFLICTION_COOLDOWNS = (
    CooldownSpellDefinition(
        SOUL_HARVEST,
        summary_kinds=(SummaryKind.DAMAGE,),
        trigger=WindowTrigger.BUFF,
    ),
    # typically none of these are used, tracked for completeness
    _summon(SUMMON_INFERNAL),
    _summon(SUMMON_DOOMGUARD),
    _summon(GRIMOIRE_IMP),
    _summon(GRIMOIRE_VOIDWALKER),
    _summon(GRIMOIRE_SUCCUBUS),
    _summon(GRIMOIRE_FELHUNTER),
)


class AfflictionCooldownTracker(BuffCooldownTracker):
    """Pet summons open a fixed 25s window, counted from the summoning cast"""

    def on_cast_by_player(self, event: CombatEvent):
        definition = self.get_definition(event.ability_id)
        if definition is not None and definition.trigger is WindowTrigger.GRANT:
            self._grant(definition, event.timestamp)
        else:
            super().on_cast_by_player(event)


class AfflictionAnalysisConfig(CoreAnalysisConfig):
    cooldown_tracker_class = AfflictionCooldownTracker

    def cooldown_definitions(self):
        return merge_definitions(super().cooldown_definitions(), AFFLICTION_COOLDOWNS)
