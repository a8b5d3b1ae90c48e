from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable


class SignalLevel(Enum):
    INFO = auto()
    ERROR = auto()


class SignalKind(Enum):
    LOADED = auto()
    LOAD_FAILED = auto()
    INSUFFICIENT_FUNDS = auto()
    MAX_OWNED = auto()
    PURCHASED = auto()
    SAVED = auto()
    SAVE_FAILED = auto()
    ACHIEVEMENT_UNLOCKED = auto()
    RESET = auto()


SIGNAL_LEVEL: dict[SignalKind, SignalLevel] = {
    SignalKind.LOADED: SignalLevel.INFO,
    SignalKind.LOAD_FAILED: SignalLevel.ERROR,
    SignalKind.INSUFFICIENT_FUNDS: SignalLevel.ERROR,
    SignalKind.MAX_OWNED: SignalLevel.ERROR,
    SignalKind.PURCHASED: SignalLevel.INFO,
    SignalKind.SAVED: SignalLevel.INFO,
    SignalKind.SAVE_FAILED: SignalLevel.ERROR,
    SignalKind.ACHIEVEMENT_UNLOCKED: SignalLevel.INFO,
    SignalKind.RESET: SignalLevel.INFO,
}


@dataclass(frozen=True)
class Signal:
    """A status message for the presentation layer.

    The kind and its trigger are the contract; the message text is a hint.
    ``subject`` names the upgrade or achievement involved, if any.
    """

    kind: SignalKind
    message: str = ""
    subject: str | None = None

    @property
    def level(self) -> SignalLevel:
        return SIGNAL_LEVEL[self.kind]

    @property
    def is_error(self) -> bool:
        return self.level is SignalLevel.ERROR


SignalSink = Callable[[Signal], None]


def discard(signal: Signal) -> None:
    """Sink that drops every signal."""


@dataclass
class SignalLog:
    """Recording sink; pass an instance wherever a SignalSink is expected."""

    signals: list[Signal] = field(default_factory=list)

    def __call__(self, signal: Signal) -> None:
        self.signals.append(signal)

    def kinds(self) -> list[SignalKind]:
        return [s.kind for s in self.signals]

    def clear(self) -> None:
        self.signals.clear()
