"""
Tests for the Consumable Dispatch Registry.

These tests verify:
    - FIFO drain order and empty drains
    - Registry reuse after a drain
    - Fail-fast policy: partial results, retained items, retry
    - push() validation and nested-drain protection
"""

import pytest

from aliaskit.consumables import CallableItem, ConsumeState, NumberItem, TextItem
from aliaskit.errors import AlreadyConsumed, ConsumptionFailed, ExclusivityViolation
from aliaskit.examples import build_example_registry
from aliaskit.registry import DispatchRegistry


def failing(message="boom"):
    def body():
        raise RuntimeError(message)
    return body


class TestOrder:
    """Test drain ordering."""

    def test_drain_in_insertion_order(self):
        """Items A, B, C are consumed in that order."""
        order = []
        registry = DispatchRegistry()
        for name in ("A", "B", "C"):
            registry.push(CallableItem(lambda name=name: order.append(name) or name))
        assert registry.drain() == ["A", "B", "C"]
        assert order == ["A", "B", "C"]

    def test_empty_drain(self):
        """Draining an empty registry returns an empty list."""
        assert DispatchRegistry().drain() == []

    def test_second_drain_is_noop(self):
        """After a full drain the registry is empty and stays so."""
        registry = DispatchRegistry()
        registry.push(TextItem("x"))
        registry.drain()
        assert len(registry) == 0
        assert not registry
        assert registry.drain() == []

    def test_hello_then_55(self):
        """The mixed text/number scenario reports both effects in order."""
        registry = DispatchRegistry()
        registry.push(TextItem("Hello"))
        registry.push(NumberItem(55))
        assert registry.drain() == ["String Hello", "u64 55"]

    def test_reuse_after_drain(self):
        """A drained registry accepts further pushes."""
        registry = DispatchRegistry()
        registry.push_value("one")
        registry.drain()
        registry.push_value(2)
        assert registry.drain() == ["u64 2"]

    def test_example_registry(self):
        """The example registry drains data and procedures uniformly."""
        seen = []
        registry = build_example_registry(emit=seen.append)
        assert registry.drain() == ["String Hello", "u64 55", "first", "second"]
        assert seen == ["String Hello", "u64 55", "first", "second"]


class TestFailFast:
    """Test the failure policy."""

    def build(self):
        registry = DispatchRegistry()
        registry.push(TextItem("a"))
        registry.push(CallableItem(failing(), name="bad"))
        registry.push(TextItem("c"))
        return registry

    def test_failure_raises_with_partial_results(self):
        """The error carries the failing index and prior results."""
        registry = self.build()
        with pytest.raises(ConsumptionFailed) as exc:
            registry.drain()
        err = exc.value
        assert err.index == 1
        assert err.consumed == 1
        assert err.results == ["String a"]
        assert isinstance(err.cause, RuntimeError)
        assert err.__cause__ is err.cause

    def test_failed_and_later_items_retained(self):
        """The failing item and everything after it stay queued in order."""
        registry = self.build()
        with pytest.raises(ConsumptionFailed):
            registry.drain()
        assert registry.pending() == ["call bad", "String c"]
        assert all(i.state is ConsumeState.PENDING for i in registry.pending_items())

    def test_consumed_items_not_rolled_back(self):
        """Items consumed before the failure stay consumed."""
        first = TextItem("a")
        registry = DispatchRegistry()
        registry.push(first)
        registry.push(CallableItem(failing()))
        with pytest.raises(ConsumptionFailed):
            registry.drain()
        assert first.consumed

    def test_retry_after_failure(self):
        """A later drain retries the retained items."""
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("first attempt")
            return "ok"

        registry = DispatchRegistry()
        registry.push(CallableItem(flaky))
        registry.push(TextItem("after"))
        with pytest.raises(ConsumptionFailed):
            registry.drain()
        assert registry.drain() == ["ok", "String after"]
        assert len(registry) == 0

    def test_failing_sink_never_reruns_procedure(self):
        """A sink failure drops the spent item; the next drain skips it."""
        runs = []
        sink_calls = []

        def sink(text):
            sink_calls.append(text)
            if len(sink_calls) == 1:
                raise OSError("sink closed")

        registry = DispatchRegistry()
        registry.push(CallableItem(lambda: runs.append("charged"), name="charge", emit=sink))
        registry.push(TextItem("after"))
        with pytest.raises(ConsumptionFailed) as exc:
            registry.drain()
        assert exc.value.index == 0
        assert isinstance(exc.value.cause, OSError)
        assert registry.pending() == ["String after"]
        assert registry.drain() == ["String after"]
        assert registry.drain() == []
        assert runs == ["charged"]

    def test_drain_report(self):
        """drain_report returns the failure instead of raising it."""
        registry = self.build()
        report = registry.drain_report()
        assert not report.ok
        assert report.failed_at == 1
        assert report.consumed == 1
        assert report.results == ["String a"]
        assert report.remaining == 2
        assert isinstance(report.error, RuntimeError)

    def test_drain_report_success(self):
        """A clean drain_report is ok with nothing remaining."""
        registry = DispatchRegistry()
        registry.push(NumberItem(7))
        report = registry.drain_report()
        assert report.ok
        assert report.results == ["u64 7"]
        assert report.remaining == 0


class TestPush:
    """Test push validation."""

    def test_rejects_non_consumable(self):
        """Plain objects must go through push_value."""
        with pytest.raises(TypeError):
            DispatchRegistry().push("Hello")

    def test_rejects_consumed_item(self):
        """A consumed item cannot be queued again."""
        item = TextItem("x")
        item.consume()
        with pytest.raises(AlreadyConsumed):
            DispatchRegistry().push(item)

    def test_rejects_duplicate(self):
        """The same item cannot occupy two slots."""
        item = TextItem("x")
        registry = DispatchRegistry()
        registry.push(item)
        with pytest.raises(ValueError):
            registry.push(item)

    def test_item_consumed_elsewhere_fails_drain(self):
        """An item consumed outside the registry hits its tombstone."""
        item = TextItem("x")
        registry = DispatchRegistry()
        registry.push(item)
        item.consume()
        with pytest.raises(ConsumptionFailed) as exc:
            registry.drain()
        assert isinstance(exc.value.cause, AlreadyConsumed)
        # A tombstoned item leaves the queue instead of blocking every drain
        assert len(registry) == 0
        assert registry.drain() == []

    def test_clear(self):
        """clear removes items without consuming them."""
        item = TextItem("x")
        registry = DispatchRegistry()
        registry.push(item)
        assert registry.clear() == [item]
        assert len(registry) == 0
        assert not item.consumed

    def test_cleared_item_can_be_pushed_again(self):
        """clear releases ownership of the removed items."""
        item = TextItem("x")
        registry = DispatchRegistry()
        registry.push(item)
        registry.clear()
        registry.push(item)
        assert registry.pending() == ["String x"]

    def test_item_held_by_one_registry(self):
        """An item queued in one registry cannot join another."""
        item = TextItem("x")
        first, second = DispatchRegistry(), DispatchRegistry()
        first.push(item)
        with pytest.raises(ExclusivityViolation):
            second.push(item)
        first.clear()
        second.push(item)
        assert second.drain() == ["String x"]

    def test_retained_item_still_owned_after_failure(self):
        """A failing item stays owned; consumed items are released."""
        done = TextItem("a")
        bad = CallableItem(failing())
        registry = DispatchRegistry()
        registry.push(done)
        registry.push(bad)
        with pytest.raises(ConsumptionFailed):
            registry.drain()
        with pytest.raises(ValueError):
            registry.push(bad)
        with pytest.raises(ExclusivityViolation):
            DispatchRegistry().push(bad)

    def test_many_pushes(self):
        """A large queue keeps its order and drains fully."""
        registry = DispatchRegistry()
        for n in range(20000):
            registry.push(NumberItem(n))
        results = registry.drain()
        assert len(results) == 20000
        assert results[-1] == "u64 19999"
        assert not registry


class TestReentrancy:
    """Test pushes and drains issued from inside a drain."""

    def test_push_during_drain_waits(self):
        """Items pushed while draining are left for the next drain."""
        registry = DispatchRegistry()
        registry.push(CallableItem(lambda: registry.push(TextItem("late")) or "early"))
        assert registry.drain() == ["early"]
        assert registry.pending() == ["String late"]
        assert registry.drain() == ["String late"]

    def test_nested_drain_fails(self):
        """Draining from inside a drain is an exclusivity violation."""
        registry = DispatchRegistry()
        registry.push(CallableItem(registry.drain, name="nested"))
        with pytest.raises(ConsumptionFailed) as exc:
            registry.drain()
        assert isinstance(exc.value.cause, ExclusivityViolation)
        assert registry.pending() == ["call nested"]
