"""
Error hierarchy for aliaskit.

Two error kinds make up the contract of the primitives:
    - IndexOutOfRange: a cell view was addressed outside its buffer
    - ConsumptionFailed: a registry drain stopped at a failing item

The remaining classes report misuse of the exclusivity rules
(a buffer checked out twice, a consumable consumed twice) and
invalid configuration.

Builtin TypeError / ValueError are still used for plain argument
mistakes (wrong type, value wider than the word size).
"""

from typing import Any, List, Optional


class AliasKitError(Exception):
    """Base class for all aliaskit errors."""
    pass


class IndexOutOfRange(AliasKitError, IndexError):
    """Raised when a cell view index is not below the buffer length."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Index {index} out of range for buffer of length {length}")


class ConsumptionFailed(AliasKitError):
    """
    Raised by a drain when consuming an item fails.

    Properties:
        cause: The exception raised by the item
        index: Position of the failing item within the drain
        consumed: Number of items consumed before the failure (== index)
        results: Results of the items consumed before the failure

    The failing item and everything after it are still held by the
    registry; nothing consumed before it is rolled back.
    """

    def __init__(self, cause: BaseException, index: int, results: Optional[List[Any]] = None):
        self.cause = cause
        self.index = index
        self.results = list(results or [])
        self.consumed = len(self.results)
        super().__init__(
            f"Consumption failed at item {index} after {self.consumed} consumed: {cause}"
        )


class ExclusivityViolation(AliasKitError):
    """Raised when a second accessor reaches a resource that is checked out."""
    pass


class AlreadyConsumed(ExclusivityViolation):
    """Raised when a consumable is consumed (or queued) after its single use."""
    pass


class ConfigError(AliasKitError):
    """Raised when configuration values are invalid."""
    pass
