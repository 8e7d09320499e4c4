"""
Example builders for demos and tests.

build_example_registry() queues the canonical mixed payload:
    "Hello" (text), 55 (u64), then two procedures that emit "first" and
    "second" themselves.

build_example_network() returns a two-stage mixing network over a
4-word buffer.
"""
from typing import Callable, List, Optional

from aliaskit.consumables import CallableItem, NumberItem, TextItem
from aliaskit.kernels import MixStep, alternating_mask, butterfly_stage
from aliaskit.registry import DispatchRegistry


def build_example_registry(emit: Optional[Callable[[str], None]] = None) -> DispatchRegistry:
    registry = DispatchRegistry()
    registry.push(TextItem("Hello", emit=emit))
    registry.push(NumberItem(55, emit=emit))

    # Procedures emit their own text.
    def first():
        if emit is not None:
            emit("first")
        return "first"

    def second():
        if emit is not None:
            emit("second")
        return "second"

    registry.push(CallableItem(first))
    registry.push(CallableItem(second))
    return registry


def build_example_network(word_bits: int = 64) -> List[MixStep]:
    # Stage 1: pair slots (0,2) and (1,3); stage 2: pair neighbours.
    steps = butterfly_stage(4, shift=1, word_bits=word_bits)
    mask = alternating_mask(2, word_bits)
    steps += [MixStep(i=0, j=1, shift=2, mask=mask), MixStep(i=2, j=3, shift=2, mask=mask)]
    return steps
