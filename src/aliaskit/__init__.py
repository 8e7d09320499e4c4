"""
aliaskit: ownership and aliasing primitives

Two independent building blocks:

    Projected Cell View
        Checks a word buffer out exclusively and gives independent
        per-slot mutability, so two slots of one buffer can be mixed
        in a single operation (transform) with only a bounds check.

    Consumable Dispatch Registry
        An ordered queue of owned, consume-once items (data payloads
        and zero-argument procedures alike), drained exactly once in
        insertion order with a fail-fast policy.

Both are single-threaded. Exclusivity and single use are enforced at
runtime and fail fast on violation.
"""

from aliaskit.cells import Buffer, Cell, ProjectedCellView, construct_view, mix_pair, transform_cells
from aliaskit.config import ToolkitConfig, default_config, load_config
from aliaskit.consumables import (
    CallableItem,
    Consumable,
    ConsumeState,
    NumberItem,
    TextItem,
    as_consumable,
)
from aliaskit.errors import (
    AliasKitError,
    AlreadyConsumed,
    ConfigError,
    ConsumptionFailed,
    ExclusivityViolation,
    IndexOutOfRange,
)
from aliaskit.kernels import MixStep, alternating_mask, apply_steps
from aliaskit.registry import DispatchRegistry, DrainReport

__version__ = "0.1.0"

__all__ = [
    "AliasKitError",
    "AlreadyConsumed",
    "Buffer",
    "CallableItem",
    "Cell",
    "ConfigError",
    "Consumable",
    "ConsumeState",
    "ConsumptionFailed",
    "DispatchRegistry",
    "DrainReport",
    "ExclusivityViolation",
    "IndexOutOfRange",
    "MixStep",
    "NumberItem",
    "ProjectedCellView",
    "TextItem",
    "ToolkitConfig",
    "alternating_mask",
    "apply_steps",
    "as_consumable",
    "construct_view",
    "default_config",
    "load_config",
    "mix_pair",
    "transform_cells",
]
