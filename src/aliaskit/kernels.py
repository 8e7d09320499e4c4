"""
Mixing networks built from the cell view's pairwise step.

A network is an ordered list of MixStep objects. Applying it runs
ProjectedCellView.transform once per step, in order. This is the shape
of butterfly stages, delta-swap permutation layers and similar
branchless bit-mixing kernels.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from aliaskit.cells import ProjectedCellView
from aliaskit.errors import IndexOutOfRange
from aliaskit.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MixStep:
    """
    One pairwise mixing step: view.transform(i, j, shift, mask).

    Properties:
        i: Index of the slot mixed with the shifted partner
        j: Index of the partner slot
        shift: Logical right shift applied to slot j's value
        mask: Bit mask selecting which bits are mixed
    """

    i: int
    j: int
    shift: int
    mask: int

    def __post_init__(self) -> None:
        for name in ("i", "j", "shift", "mask"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"MixStep.{name} must be int, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"MixStep.{name} must be non-negative, got {value}")


def alternating_mask(shift: int, word_bits: int = 64) -> int:
    """
    Repeating mask of `shift` one-bits followed by `shift` zero-bits.

    alternating_mask(1) == 0x5555555555555555 (u64 max / 3)
    alternating_mask(2) == 0x3333333333333333
    alternating_mask(4) == 0x0F0F0F0F0F0F0F0F
    """
    if shift <= 0:
        raise ValueError(f"shift must be positive, got {shift}")
    block = (1 << shift) - 1
    mask = 0
    for offset in range(0, word_bits, 2 * shift):
        mask |= block << offset
    return mask & ((1 << word_bits) - 1)


def validate_steps(steps: Iterable[MixStep], length: int) -> List[MixStep]:
    """
    Check every step's indices against a buffer length.

    Raises:
        IndexOutOfRange: For the first step touching an index >= length
    """
    checked = []
    for step in steps:
        if step.i >= length:
            raise IndexOutOfRange(step.i, length)
        if step.j >= length:
            raise IndexOutOfRange(step.j, length)
        checked.append(step)
    return checked


def apply_steps(view: ProjectedCellView, steps: Iterable[MixStep]) -> int:
    """
    Apply a mixing network to a view.

    All steps are validated first, so an out-of-range step leaves the
    buffer untouched.

    Returns:
        Number of steps applied
    """
    checked = validate_steps(steps, len(view))
    for step in checked:
        view.transform(step.i, step.j, step.shift, step.mask)
    logger.debug("Applied %d mixing steps", len(checked))
    return len(checked)


def butterfly_stage(length: int, shift: int, word_bits: int = 64) -> List[MixStep]:
    """
    Steps pairing slot k with slot k + length // 2 for the first half.

    Every step uses alternating_mask(shift, word_bits).
    """
    if length % 2:
        raise ValueError(f"butterfly stage needs an even length, got {length}")
    half = length // 2
    mask = alternating_mask(shift, word_bits)
    return [MixStep(i=k, j=k + half, shift=shift, mask=mask) for k in range(half)]
