from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from cookiecore.state import GameState

Predicate = Callable[['GameState'], bool]

# Threshold operators accepted by Req.cookies, Req.count and friends
OPERATORS: dict[str, Callable[[float, float], bool]] = {
    ">=": operator.ge,
    ">": operator.gt,
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
}


def compare(left: float, op: str, right: float) -> bool:
    try:
        return OPERATORS[op](left, right)
    except KeyError:
        raise ValueError(
            f"Unknown operator: {op!r}. Expected one of {', '.join(OPERATORS)}"
        ) from None


class Requirement(ABC):
    """Base class for all requirements: pure boolean conditions on game state."""

    @abstractmethod
    def evaluate(self, state: GameState) -> bool: ...

    def __call__(self, state: GameState) -> bool:
        return self.evaluate(state)

    def __and__(self, other: Requirement) -> Requirement:
        return _AllRequirement([self, other])

    def __or__(self, other: Requirement) -> Requirement:
        return _AnyRequirement([self, other])


# ── Private implementations ──────────────────────────────────────────


class _FieldRequirement(Requirement):
    def __init__(self, field_name: str, op: str, threshold: float) -> None:
        self.field_name = field_name
        self.op = op
        self.threshold = threshold

    def evaluate(self, state: GameState) -> bool:
        return compare(getattr(state, self.field_name), self.op, self.threshold)


class _OwnsRequirement(Requirement):
    def __init__(self, upgrade_id: str) -> None:
        self.upgrade_id = upgrade_id

    def evaluate(self, state: GameState) -> bool:
        return state.upgrade_owned(self.upgrade_id) >= 1


class _CountRequirement(Requirement):
    def __init__(self, upgrade_id: str, op: str, threshold: int) -> None:
        self.upgrade_id = upgrade_id
        self.op = op
        self.threshold = threshold

    def evaluate(self, state: GameState) -> bool:
        return compare(state.upgrade_owned(self.upgrade_id), self.op, self.threshold)


class _AllRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, state: GameState) -> bool:
        return all(r.evaluate(state) for r in self.reqs)


class _AnyRequirement(Requirement):
    def __init__(self, reqs: list[Requirement]) -> None:
        self.reqs = reqs

    def evaluate(self, state: GameState) -> bool:
        return any(r.evaluate(state) for r in self.reqs)


class _CustomRequirement(Requirement):
    def __init__(self, fn: Predicate) -> None:
        self.fn = fn

    def evaluate(self, state: GameState) -> bool:
        return bool(self.fn(state))


# ── Public factory ───────────────────────────────────────────────────


class Req:
    """Factory for built-in requirement types."""

    @staticmethod
    def cookies(op: str, threshold: float) -> Requirement:
        return _FieldRequirement("cookies", op, threshold)

    @staticmethod
    def total_cookies(op: str, threshold: float) -> Requirement:
        return _FieldRequirement("total_cookies", op, threshold)

    @staticmethod
    def per_click(op: str, threshold: float) -> Requirement:
        return _FieldRequirement("cookies_per_click", op, threshold)

    @staticmethod
    def per_second(op: str, threshold: float) -> Requirement:
        return _FieldRequirement("cookies_per_second", op, threshold)

    @staticmethod
    def owns(upgrade_id: str) -> Requirement:
        return _OwnsRequirement(upgrade_id)

    @staticmethod
    def count(upgrade_id: str, op: str, threshold: int) -> Requirement:
        return _CountRequirement(upgrade_id, op, threshold)

    @staticmethod
    def all(*reqs: Requirement) -> Requirement:
        return _AllRequirement(list(reqs))

    @staticmethod
    def any(*reqs: Requirement) -> Requirement:
        return _AnyRequirement(list(reqs))

    @staticmethod
    def custom(fn: Predicate) -> Requirement:
        return _CustomRequirement(fn)
