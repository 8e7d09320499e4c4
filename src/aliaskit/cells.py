"""
Projected Cell View over a word buffer.

A ProjectedCellView checks a buffer out exclusively and then hands out
independent per-slot access (get / set / Cell handles). Because the
view is the only live accessor of the buffer, two slots of the same
buffer can be read and written in one operation without any aliasing
check; the only per-access check is the index bound.

Exclusivity is enforced at runtime:
    - A buffer (Buffer or plain mutable sequence) can be checked out by
      at most one live view; a second construct_view() fails fast.
    - While checked out, owner-side access through a Buffer fails fast.
    - A released view refuses all further access.

Owner-side access through a raw list that was handed to a view cannot be
intercepted. Keeping away from it while the view is alive is up to the
caller; wrap the data in a Buffer to have it checked.

Values are unsigned integers of a fixed width (word_bits, default 64).
"""
from __future__ import annotations

import weakref
from collections.abc import MutableSequence
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from aliaskit.config import SUPPORTED_WORD_BITS, default_config
from aliaskit.errors import ExclusivityViolation, IndexOutOfRange
from aliaskit.log import get_logger

logger = get_logger(__name__)

# id(buffer) -> token of the view currently holding it
_CHECKOUTS: Dict[int, object] = {}


def _resolve_word_bits(word_bits: Optional[int]) -> int:
    if word_bits is None:
        return default_config().word_bits
    if word_bits not in SUPPORTED_WORD_BITS:
        raise ValueError(f"word_bits must be one of {SUPPORTED_WORD_BITS}, got {word_bits!r}")
    return word_bits


def _check_value(value: int, word_mask: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Buffer values must be int, got {type(value).__name__}")
    if value < 0 or value > word_mask:
        raise ValueError(f"Value {value} does not fit in {word_mask.bit_length()} bits")
    return value


def mix_pair(a: int, b: int, shift: int, mask: int) -> Tuple[int, int]:
    """
    The pairwise mixing step.

        t  = (a ^ (b >> shift)) & mask
        a' = a ^ t
        b' = b ^ t

    b is combined with the unshifted t, so this is a diffusion step
    and not a bit swap. A shift at or beyond the word width shifts b
    out entirely, giving t = a & mask.

    Raises:
        ValueError: If shift is negative
    """
    if shift < 0:
        raise ValueError(f"shift must be non-negative, got {shift}")
    t = (a ^ (b >> shift)) & mask
    return a ^ t, b ^ t


class Buffer:
    """
    Owning wrapper around a fixed-length word buffer.

    Owner-side indexing works like a list until a view checks the
    buffer out; from then until the view is released, owner access
    raises ExclusivityViolation.

    Properties:
        word_bits: Element width in bits
        checked_out: True while a live view holds the buffer
    """

    def __init__(self, values: Iterable[int] = (), word_bits: Optional[int] = None):
        self.word_bits = _resolve_word_bits(word_bits)
        self.word_mask = (1 << self.word_bits) - 1
        self._values: List[int] = [_check_value(v, self.word_mask) for v in values]
        self._holder: Optional[object] = None

    @classmethod
    def zeros(cls, length: int, word_bits: Optional[int] = None) -> "Buffer":
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        return cls([0] * length, word_bits=word_bits)

    @property
    def checked_out(self) -> bool:
        return self._holder is not None

    def _ensure_owner(self) -> None:
        if self._holder is not None:
            raise ExclusivityViolation("Buffer is checked out by a live view")

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> int:
        self._ensure_owner()
        return self._values[index]

    def __setitem__(self, index: int, value: int) -> None:
        self._ensure_owner()
        self._values[index] = _check_value(value, self.word_mask)

    def to_list(self) -> List[int]:
        self._ensure_owner()
        return list(self._values)

    def view(self) -> "ProjectedCellView":
        return ProjectedCellView(self)

    def __repr__(self) -> str:
        if self.checked_out:
            return f"Buffer(<checked out>, len={len(self._values)}, word_bits={self.word_bits})"
        return f"Buffer({self._values!r}, word_bits={self.word_bits})"


BufferLike = Union[Buffer, MutableSequence]


def _check_out(target: BufferLike, token: object) -> None:
    key = id(target)
    if key in _CHECKOUTS:
        raise ExclusivityViolation("Buffer is already checked out by another live view")
    _CHECKOUTS[key] = token
    if isinstance(target, Buffer):
        target._holder = token


def _check_in(target: BufferLike, token: object) -> None:
    key = id(target)
    if _CHECKOUTS.get(key) is token:
        del _CHECKOUTS[key]
    if isinstance(target, Buffer) and target._holder is token:
        target._holder = None


class Cell:
    """
    A handle to one slot of a view.

    The index is bounds-checked once, when the handle is created; get
    and set then go straight to the slot. Handles share the lifetime
    of their view.
    """

    __slots__ = ("_view", "_index")

    def __init__(self, view: "ProjectedCellView", index: int):
        self._view = view
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    @property
    def view(self) -> "ProjectedCellView":
        return self._view

    def get(self) -> int:
        self._view._ensure_live()
        return self._view._storage[self._index]

    def set(self, value: int) -> None:
        view = self._view
        view._ensure_live()
        view._storage[self._index] = _check_value(value, view.word_mask)

    def __repr__(self) -> str:
        return f"Cell(index={self._index})"


class ProjectedCellView:
    """
    Exclusive view over a buffer with independent per-slot mutability.

    Construction checks the buffer out; release() (or leaving a with
    block) checks it back in. The buffer length is fixed for the
    lifetime of the view.

    Indices are plain non-negative ints. Negative indices are out of
    range; they are never counted from the end.
    """

    def __init__(self, buffer: BufferLike, word_bits: Optional[int] = None):
        if isinstance(buffer, Buffer):
            if word_bits is not None and word_bits != buffer.word_bits:
                raise ValueError(
                    f"word_bits {word_bits} does not match buffer word_bits {buffer.word_bits}"
                )
            storage = buffer._values
            bits = buffer.word_bits
        elif isinstance(buffer, MutableSequence):
            storage = buffer
            bits = _resolve_word_bits(word_bits)
        else:
            raise TypeError(f"Cannot project a view over {type(buffer).__name__}")

        self.word_bits = bits
        self.word_mask = (1 << bits) - 1
        for value in storage:
            _check_value(value, self.word_mask)

        token = object()
        _check_out(buffer, token)
        self._buffer = buffer
        self._storage = storage
        self._length = len(storage)
        self._released = False
        self._finalizer = weakref.finalize(self, _check_in, buffer, token)
        logger.debug("Checked out buffer of length %d (%d-bit words)", self._length, bits)

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Check the buffer back in. Releasing twice is a no-op."""
        if self._released:
            return
        self._released = True
        self._finalizer()
        logger.debug("Released buffer of length %d", self._length)

    def __enter__(self) -> "ProjectedCellView":
        self._ensure_live()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def _ensure_live(self) -> None:
        if self._released:
            raise ExclusivityViolation("View has been released")

    def _index(self, index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Index must be int, got {type(index).__name__}")
        if index < 0 or index >= self._length:
            raise IndexOutOfRange(index, self._length)
        return index

    # ------------------------------------------------------------------
    # Slot access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self._length

    def get(self, index: int) -> int:
        self._ensure_live()
        return self._storage[self._index(index)]

    def set(self, index: int, value: int) -> None:
        self._ensure_live()
        i = self._index(index)
        self._storage[i] = _check_value(value, self.word_mask)

    def transform(self, i: int, j: int, shift: int, mask: int) -> None:
        """
        Mix slots i and j in place (see mix_pair).

        Both indices are checked before anything is written. i == j is
        allowed: both writes land on the same slot and the second wins.

        Raises:
            IndexOutOfRange: If i or j is not below the buffer length
            ValueError: If shift is negative
        """
        self._ensure_live()
        i = self._index(i)
        j = self._index(j)
        storage = self._storage
        a, b = mix_pair(storage[i], storage[j], shift, mask & self.word_mask)
        storage[i] = a
        storage[j] = b

    def cell(self, index: int) -> Cell:
        self._ensure_live()
        return Cell(self, self._index(index))

    def cells(self) -> List[Cell]:
        self._ensure_live()
        return [Cell(self, i) for i in range(self._length)]

    def snapshot(self) -> List[int]:
        """Copy of the current values, read through the view."""
        self._ensure_live()
        return list(self._storage)

    def __iter__(self) -> Iterator[int]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        if self._released:
            return "ProjectedCellView(<released>)"
        return f"ProjectedCellView({list(self._storage)!r}, word_bits={self.word_bits})"


def construct_view(buffer: BufferLike, word_bits: Optional[int] = None) -> ProjectedCellView:
    """
    Check a buffer out and return a view over it.

    Args:
        buffer: A Buffer, or any mutable sequence of ints (list, array.array)
        word_bits: Element width for plain sequences (defaults to config)

    Raises:
        ExclusivityViolation: If another live view holds the buffer
        TypeError / ValueError: If the buffer holds non-word values
    """
    return ProjectedCellView(buffer, word_bits=word_bits)


def transform_cells(a: Cell, b: Cell, shift: int, mask: int) -> None:
    """Mixing step over two cell handles, possibly from different views."""
    a_value = a.get()
    b_value = b.get()
    mask &= a.view.word_mask & b.view.word_mask
    new_a, new_b = mix_pair(a_value, b_value, shift, mask)
    a.set(new_a)
    b.set(new_b)
