import logging
import threading
from typing import Optional

from analysis.abilities import AGONY, UNSTABLE_AFFLICTION
from analysis.affliction_analysis import AfflictionAnalysisConfig
from analysis.core_analysis import CoreAnalysisConfig
from analysis.dispatch import ModuleDispatcher, Player
from analysis.errors import AnalysisCancelled
from analysis.events import CombatEvent, EventSequence, EventType
from analysis.settings import AnalysisSettings
from report import Fight

logger = logging.getLogger(__name__)

# marks a spec that was looked for and not found
_UNDETECTED = object()


class Analyzer:
    SPEC_ANALYSIS_CONFIGS = {
        "Default": CoreAnalysisConfig,
        "Affliction": AfflictionAnalysisConfig,
    }

    def __init__(self, fight: Fight, settings: Optional[AnalysisSettings] = None):
        self._fight = fight
        self._settings = settings or AnalysisSettings.from_env()
        self._events = EventSequence(self._fight.events, include=self._filter_event)
        self.__spec = _UNDETECTED
        self._analysis_config = self._select_config()
        self._dispatcher = None

    @property
    def dispatcher(self) -> Optional[ModuleDispatcher]:
        return self._dispatcher

    @property
    def spec(self):
        return self._detect_spec()

    def _detect_spec(self):
        if self.__spec is _UNDETECTED:

            def detect():
                if self._fight.spec:
                    return self._fight.spec

                for event in self._events:
                    if (
                        event.source_id == self._fight.source.id
                        and event.type is EventType.CAST
                        and event.ability_id
                        in (UNSTABLE_AFFLICTION.ability_id, AGONY.ability_id)
                    ):
                        return "Affliction"

                return None

            self.__spec = detect()
        return self.__spec

    def _select_config(self):
        spec = self._detect_spec()
        if spec is not None and spec not in self.SPEC_ANALYSIS_CONFIGS:
            logger.warning(
                "Unknown spec %r for %s, using the default analysis",
                spec,
                self._fight.source.name,
            )
        return self.SPEC_ANALYSIS_CONFIGS.get(
            spec, self.SPEC_ANALYSIS_CONFIGS["Default"]
        )()

    def _filter_event(self, event: CombatEvent):
        """Drop events that involve neither the player nor their pets"""
        source = self._fight.source
        return (
            event.source_id == source.id
            or event.target_id == source.id
            or event.source_id in source.pets
            or event.target_id in source.pets
            or (event.source_is_pet and event.source_owner_id == source.id)
        )

    def _create_dispatcher(self):
        source = self._fight.source
        dispatcher = ModuleDispatcher(
            Player(source.id, source.name, source.pets),
            fail_fast=self._settings.fail_fast,
        )
        # configuration errors surface here, before any event is replayed
        for analyzer in self._analysis_config.get_analyzers(
            self._fight, self._settings
        ):
            dispatcher.register(analyzer)
        return dispatcher

    def analyze(self, cancel_event: Optional[threading.Event] = None):
        self._dispatcher = dispatcher = self._create_dispatcher()

        for event in self._events:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(
                    "Analysis of %s cancelled at %s",
                    self._fight.source.name,
                    event.timestamp,
                )
                raise AnalysisCancelled(event.timestamp)
            dispatcher.dispatch(event)

        dispatcher.finish(self._fight.end_time)

        analysis = {}
        for analyzer in dispatcher.modules:
            if dispatcher.is_active(analyzer):
                analysis.update(**analyzer.report())

        if self._events.skipped:
            logger.warning(
                "Skipped %d malformed events for %s",
                self._events.skipped,
                self._fight.source.name,
            )

        return {
            "fight_metadata": {
                "source": self._fight.source.name,
                "encounter": self._fight.encounter.name,
                "start_time": self._fight.start_time,
                "end_time": self._fight.end_time,
                "duration": self._fight.duration,
            },
            "analysis": analysis,
            "module_errors": dispatcher.report_failures(),
            "skipped_events": self._events.skipped,
            "num_events": dispatcher.num_dispatched,
            "spec": self._detect_spec(),
        }


def analyze(
    fight: Fight,
    settings: Optional[AnalysisSettings] = None,
    cancel_event: Optional[threading.Event] = None,
):
    analyzer = Analyzer(fight, settings)
    return analyzer.analyze(cancel_event)
