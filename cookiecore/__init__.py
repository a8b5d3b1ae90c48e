# cookiecore: Cookie Clicker Game State Reducer

from cookiecore.requirement import OPERATORS, Predicate, Requirement, Req, compare
from cookiecore.cost_scaling import CostScaling
from cookiecore.upgrade import Upgrade
from cookiecore.achievement import Achievement
from cookiecore.definition import GameDefinition, GameConfig, resolve_icon
from cookiecore.catalog import define_game
from cookiecore.state import GameState
from cookiecore.signals import Signal, SignalKind, SignalLevel, SignalLog, SignalSink
from cookiecore.persistence import (
    Storage,
    MemoryStorage,
    FileStorage,
    StorageError,
    CorruptSaveError,
    state_to_dict,
    state_from_dict,
    dumps_state,
    loads_state,
)
from cookiecore.runtime import GameRuntime, PurchaseResult

__all__ = [
    # Requirements
    "OPERATORS",
    "Predicate",
    "compare",
    "Requirement",
    "Req",
    # Cost
    "CostScaling",
    # Data model
    "Upgrade",
    "Achievement",
    # Definition
    "GameDefinition",
    "GameConfig",
    "resolve_icon",
    "define_game",
    # State
    "GameState",
    # Signals
    "Signal",
    "SignalKind",
    "SignalLevel",
    "SignalLog",
    "SignalSink",
    # Persistence
    "Storage",
    "MemoryStorage",
    "FileStorage",
    "StorageError",
    "CorruptSaveError",
    "state_to_dict",
    "state_from_dict",
    "dumps_state",
    "loads_state",
    # Runtime
    "GameRuntime",
    "PurchaseResult",
]
