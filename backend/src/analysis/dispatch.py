import logging
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from analysis.base import BaseAnalyzer
from analysis.events import CombatEvent, EventType

logger = logging.getLogger(__name__)


class Relation(Enum):
    BY_PLAYER = "by_player"
    BY_PLAYER_PET = "by_player_pet"
    TO_PLAYER = "to_player"
    BY_ANY_ACTOR = "by_any_actor"


class Capability(NamedTuple):
    handler_name: str
    relation: Relation
    # None matches every event type
    event_type: Optional[EventType]


CAPABILITIES = (
    Capability("on_cast_by_player", Relation.BY_PLAYER, EventType.CAST),
    Capability("on_damage_by_player", Relation.BY_PLAYER, EventType.DAMAGE),
    Capability("on_damage_by_player_pet", Relation.BY_PLAYER_PET, EventType.DAMAGE),
    Capability("on_heal_by_player", Relation.BY_PLAYER, EventType.HEAL),
    Capability("on_heal_by_player_pet", Relation.BY_PLAYER_PET, EventType.HEAL),
    Capability("on_summon_by_player", Relation.BY_PLAYER, EventType.SUMMON),
    Capability("on_buff_apply_to_player", Relation.TO_PLAYER, EventType.APPLY_BUFF),
    Capability("on_buff_remove_to_player", Relation.TO_PLAYER, EventType.REMOVE_BUFF),
    Capability(
        "on_resource_change_to_player",
        Relation.TO_PLAYER,
        EventType.RESOURCE_CHANGE,
    ),
    Capability("on_death_to_player", Relation.TO_PLAYER, EventType.DEATH),
    Capability("on_event", Relation.BY_ANY_ACTOR, None),
)


class Player:
    def __init__(self, id, name=None, pets=()):
        self.id = id
        self.name = name
        self.pets = set(pets)

    def relations(self, event: CombatEvent) -> List[Relation]:
        relations = []
        is_pet = event.source_id in self.pets or (
            event.source_is_pet and event.source_owner_id == self.id
        )
        if event.source_id == self.id and not event.source_is_pet:
            relations.append(Relation.BY_PLAYER)
        elif is_pet:
            relations.append(Relation.BY_PLAYER_PET)
        if event.target_id == self.id:
            relations.append(Relation.TO_PLAYER)
        relations.append(Relation.BY_ANY_ACTOR)
        return relations


class ModuleFailure(NamedTuple):
    module: str
    handler: str
    timestamp: Optional[int]
    error: str

    def to_dict(self):
        return self._asdict()


HandlerKey = Tuple[Relation, Optional[EventType]]


class _RegisteredModule:
    def __init__(self, module: BaseAnalyzer):
        self.module = module
        self.active = True
        self.handlers: Dict[HandlerKey, Tuple[str, Callable]] = {}

        for capability in CAPABILITIES:
            handler = getattr(module, capability.handler_name, None)
            if handler is not None:
                key = (capability.relation, capability.event_type)
                self.handlers[key] = (capability.handler_name, handler)


class ModuleDispatcher:
    """
    Delivers every event, in sequence order, to the matching handlers of each
    registered module.

    A handler that raises is recorded in `failures` and its module is
    deactivated for the rest of the run, unless `fail_fast` is set in which
    case the exception propagates.
    """

    def __init__(self, player: Player, fail_fast=False, logger=logger):
        self._player = player
        self._fail_fast = fail_fast
        self._logger = logger
        self._modules: List[_RegisteredModule] = []
        self.failures: List[ModuleFailure] = []
        self.num_dispatched = 0

    @property
    def modules(self):
        return [registered.module for registered in self._modules]

    def register(self, module: BaseAnalyzer):
        # raises ConfigurationError before any event is replayed
        module.validate()
        self._modules.append(_RegisteredModule(module))
        return module

    def dispatch(self, event: CombatEvent):
        relations = self._player.relations(event)

        for registered in self._modules:
            if not registered.active:
                continue

            for relation in relations:
                for key in ((relation, event.type), (relation, None)):
                    entry = registered.handlers.get(key)
                    if entry is None:
                        continue
                    handler_name, handler = entry
                    if not self._call(registered, handler_name, handler, event):
                        break
                if not registered.active:
                    break

        self.num_dispatched += 1

    def finish(self, end_time):
        for registered in self._modules:
            if registered.active:
                self._call(
                    registered,
                    "finish",
                    registered.module.finish,
                    end_time,
                    timestamp=end_time,
                )

    def _call(self, registered, handler_name, handler, arg, timestamp=None):
        try:
            handler(arg)
        except Exception as e:
            if self._fail_fast:
                raise
            if timestamp is None:
                timestamp = getattr(arg, "timestamp", None)
            self._logger.exception(
                "%s.%s failed at %s, deactivating module",
                registered.module.name,
                handler_name,
                timestamp,
            )
            self.failures.append(
                ModuleFailure(
                    module=registered.module.name,
                    handler=handler_name,
                    timestamp=timestamp,
                    error=repr(e),
                )
            )
            registered.active = False
            return False
        return True

    def is_active(self, module: BaseAnalyzer):
        for registered in self._modules:
            if registered.module is module:
                return registered.active
        return False

    def report_failures(self):
        return [failure.to_dict() for failure in self.failures]
