"""
Consumable Dispatch Registry.

An ordered queue of owned Consumable items. push() appends; drain()
consumes every item once, first in first out, removing each one as it
is consumed.

Failure policy (fail fast):
    - The first item whose consumption raises stops the drain.
    - That item and every item after it stay queued, in order (see below
      for an item that is consumed already).
    - Items consumed before it are not rolled back.
    - drain() raises ConsumptionFailed with the partial results;
      drain_report() returns the same information as a DrainReport.

Only the items present when a drain starts are processed; items pushed
while it runs wait for the next drain.

An item that is already consumed when the drain reaches it (its emit
sink failed, or it was consumed outside the registry) can never run
again, so it leaves the queue even though the drain stops there.

Each item is held by at most one registry at a time.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, List, Optional

from aliaskit.consumables import Consumable, Emit, as_consumable
from aliaskit.errors import AlreadyConsumed, ConsumptionFailed, ExclusivityViolation
from aliaskit.log import get_logger

logger = get_logger(__name__)


@dataclass
class DrainReport:
    """
    Outcome of one drain.

    Properties:
        results: Results of the consumed items, in order
        consumed: Number of items consumed
        failed_at: Position of the failing item, or None on success
        error: The exception raised by the failing item, or None
        remaining: Items still queued after the drain

    When the failing item was already consumed (see module docstring)
    it is not counted in consumed and has no entry in results.
    """

    results: List[Any] = field(default_factory=list)
    consumed: int = 0
    failed_at: Optional[int] = None
    error: Optional[BaseException] = None
    remaining: int = 0

    @property
    def ok(self) -> bool:
        return self.failed_at is None


class DispatchRegistry:
    """Ordered, drain-once queue of Consumable items."""

    def __init__(self):
        self._items: Deque[Consumable] = deque()
        self._draining = False

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def push(self, item: Consumable) -> None:
        """
        Append an item to the end of the queue.

        Raises:
            TypeError: If item is not a Consumable
            AlreadyConsumed: If item was consumed already
            ValueError: If item is already queued in this registry
            ExclusivityViolation: If another registry holds the item
        """
        if not isinstance(item, Consumable):
            raise TypeError(f"Registry holds Consumable items, got {type(item).__name__}")
        if item.consumed:
            raise AlreadyConsumed(f"{item.describe()} was consumed already")
        if item._owner is self:
            raise ValueError(f"{item.describe()} is already queued")
        if item._owner is not None:
            raise ExclusivityViolation(f"{item.describe()} is held by another registry")
        item._owner = self
        self._items.append(item)

    def _pop_head(self) -> Consumable:
        item = self._items.popleft()
        item._owner = None
        return item

    def push_value(self, obj: Any, emit: Optional[Emit] = None) -> Consumable:
        """Wrap a str, int or zero-argument callable and push it."""
        item = as_consumable(obj, emit=emit)
        self.push(item)
        return item

    def pending(self) -> List[str]:
        """Descriptions of the queued items, in order."""
        return [item.describe() for item in self._items]

    def pending_items(self) -> List[Consumable]:
        return list(self._items)

    def _run(self) -> DrainReport:
        if self._draining:
            raise ExclusivityViolation("drain() called while the registry is draining")
        self._draining = True
        report = DrainReport()
        try:
            for index in range(len(self._items)):
                item = self._items[0]
                try:
                    result = item.consume()
                except Exception as e:
                    report.failed_at = index
                    report.error = e
                    if item.consumed:
                        self._pop_head()
                    logger.warning(
                        "Drain halted at item %d (%s): %s", index, item.describe(), e
                    )
                    break
                self._pop_head()
                report.results.append(result)
                report.consumed += 1
        finally:
            self._draining = False
        report.remaining = len(self._items)
        logger.debug("Drained %d item(s), %d remaining", report.consumed, report.remaining)
        return report

    def drain(self) -> List[Any]:
        """
        Consume every queued item in insertion order.

        Returns:
            List of results, one per consumed item (empty for an empty registry)

        Raises:
            ConsumptionFailed: If an item fails; the failing item (unless it
                is consumed already) and all later items remain queued
            ExclusivityViolation: If called from inside a running drain
        """
        report = self._run()
        if report.error is not None:
            raise ConsumptionFailed(report.error, report.failed_at, report.results) from report.error
        return report.results

    def drain_report(self) -> DrainReport:
        """Like drain(), but reports a failure instead of raising it."""
        return self._run()

    def clear(self) -> List[Consumable]:
        """Remove every queued item without consuming it and return them."""
        if self._draining:
            raise ExclusivityViolation("clear() called while the registry is draining")
        items = list(self._items)
        self._items.clear()
        for item in items:
            item._owner = None
        return items

    def __repr__(self) -> str:
        return f"DispatchRegistry({self.pending()!r})"
