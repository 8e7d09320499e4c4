"""
Consume-once items for the dispatch registry.

A Consumable is an owned unit of work with a single consumption
capability. Data payloads (text, numbers) and zero-argument procedures
are the same abstraction here: each is a Consumable variant, and a
registry treats them uniformly.

Python has no move semantics, so single use is enforced with a
tombstone: every item carries a ConsumeState, checked on entry to
consume().

    PENDING ---consume()---> CONSUMING ---ok---> CONSUMED (tombstone)
                                 |
                                 +---raises---> PENDING (retryable)

The emit sink runs after the tombstone is set. A failing sink is
reported to the caller, but the item stays consumed and its body
never runs again.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional

from aliaskit.errors import AlreadyConsumed

Emit = Callable[[str], None]

U64_MAX = (1 << 64) - 1


class ConsumeState(Enum):
    """Lifecycle of a consumable."""
    PENDING = "pending"
    CONSUMING = "consuming"
    CONSUMED = "consumed"


class Consumable(ABC):
    """
    Base class for consume-once items.

    Subclasses implement _finish(), the consumption body, and describe(),
    a short text used for effects and for inspecting pending items.

    Properties:
        state: Current ConsumeState
        emit: Optional sink receiving the effect description after success
    """

    kind = "consumable"

    def __init__(self, emit: Optional[Emit] = None):
        self._state = ConsumeState.PENDING
        self.emit = emit
        # Registry currently holding the item, set by DispatchRegistry.push
        self._owner: Optional[object] = None

    @property
    def state(self) -> ConsumeState:
        return self._state

    @property
    def consumed(self) -> bool:
        return self._state is ConsumeState.CONSUMED

    @abstractmethod
    def describe(self) -> str:
        """Short description of the item."""

    @abstractmethod
    def _finish(self) -> Any:
        """Consumption body. Runs at most once successfully."""

    def consume(self) -> Any:
        """
        Consume the item and return its result.

        Raises:
            AlreadyConsumed: If the item was consumed already, or is being
                consumed right now (re-entrant call)
            Exception: Whatever the consumption body raises; the item is
                then back in PENDING and may be consumed again
            Exception: Whatever the emit sink raises; the item is then
                CONSUMED already
        """
        if self._state is not ConsumeState.PENDING:
            raise AlreadyConsumed(f"{self.describe()} is {self._state.value}")
        self._state = ConsumeState.CONSUMING
        try:
            result = self._finish()
        except BaseException:
            self._state = ConsumeState.PENDING
            raise
        self._state = ConsumeState.CONSUMED
        self._dispose()
        if self.emit is not None:
            self.emit(self.describe())
        return result

    def _dispose(self) -> None:
        """Drop payload references after a successful consumption."""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.describe()!r} {self._state.value}>"


class TextItem(Consumable):
    """Text payload. Its effect is "String <text>"."""

    kind = "text"

    def __init__(self, text: str, emit: Optional[Emit] = None):
        if not isinstance(text, str):
            raise TypeError(f"TextItem needs str, got {type(text).__name__}")
        super().__init__(emit)
        self.text = text

    def describe(self) -> str:
        return f"String {self.text}"

    def _finish(self) -> str:
        return self.describe()


class NumberItem(Consumable):
    """Unsigned 64-bit payload. Its effect is "u64 <value>"."""

    kind = "u64"

    def __init__(self, value: int, emit: Optional[Emit] = None):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"NumberItem needs int, got {type(value).__name__}")
        if value < 0 or value > U64_MAX:
            raise ValueError(f"Value {value} does not fit in 64 bits")
        super().__init__(emit)
        self.value = value

    def describe(self) -> str:
        return f"u64 {self.value}"

    def _finish(self) -> str:
        return self.describe()


class CallableItem(Consumable):
    """
    Zero-argument procedure. Its result is whatever the procedure returns.

    The reference to the procedure is dropped once it has run.
    """

    kind = "callable"

    def __init__(self, fn: Callable[[], Any], name: Optional[str] = None, emit: Optional[Emit] = None):
        if not callable(fn):
            raise TypeError(f"CallableItem needs a callable, got {type(fn).__name__}")
        super().__init__(emit)
        self.name = name or getattr(fn, "__name__", type(fn).__name__)
        self._fn: Optional[Callable[[], Any]] = fn

    def describe(self) -> str:
        return f"call {self.name}"

    def _finish(self) -> Any:
        return self._fn()

    def _dispose(self) -> None:
        self._fn = None


def as_consumable(obj: Any, emit: Optional[Emit] = None) -> Consumable:
    """
    Wrap a plain value as a Consumable.

        Consumable -> returned unchanged
        str        -> TextItem
        int        -> NumberItem
        callable   -> CallableItem

    Raises:
        TypeError: For anything else
    """
    if isinstance(obj, Consumable):
        return obj
    if isinstance(obj, str):
        return TextItem(obj, emit=emit)
    if isinstance(obj, int) and not isinstance(obj, bool):
        return NumberItem(obj, emit=emit)
    if callable(obj):
        return CallableItem(obj, emit=emit)
    raise TypeError(f"Cannot wrap {type(obj).__name__} as a consumable")
