"""
Serialization helpers for aliaskit objects.

Provides JSON/YAML forms via an explicit intermediate dict:
    - Mixing networks (MixStep lists) round-trip losslessly
    - Buffers and view snapshots round-trip as word width + values
    - Registries serialize one way only, as a description of the
      queued items; live consumables are not rebuilt from text
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from aliaskit.cells import Buffer, ProjectedCellView
from aliaskit.kernels import MixStep
from aliaskit.registry import DispatchRegistry


def step_to_dict(step: MixStep) -> Dict[str, Any]:
    return {"i": step.i, "j": step.j, "shift": step.shift, "mask": step.mask}


def step_from_dict(d: Dict[str, Any]) -> MixStep:
    try:
        return MixStep(i=d["i"], j=d["j"], shift=d["shift"], mask=d["mask"])
    except KeyError as e:
        raise ValueError(f"MixStep dict is missing key {e}")


def steps_to_dict(steps: List[MixStep]) -> Dict[str, Any]:
    return {"steps": [step_to_dict(s) for s in steps]}


def steps_from_dict(d: Dict[str, Any]) -> List[MixStep]:
    return [step_from_dict(s) for s in d.get("steps", [])]


def steps_to_json(steps: List[MixStep]) -> str:
    return json.dumps(steps_to_dict(steps), sort_keys=True)


def steps_from_json(s: str) -> List[MixStep]:
    return steps_from_dict(json.loads(s))


def steps_to_yaml(steps: List[MixStep]) -> str:
    return yaml.safe_dump(steps_to_dict(steps))


def steps_from_yaml(s: str) -> List[MixStep]:
    return steps_from_dict(yaml.safe_load(s) or {})


def view_snapshot_to_dict(view: ProjectedCellView) -> Dict[str, Any]:
    return {"word_bits": view.word_bits, "values": view.snapshot()}


def buffer_to_dict(buffer: Buffer) -> Dict[str, Any]:
    return {"word_bits": buffer.word_bits, "values": buffer.to_list()}


def buffer_from_dict(d: Dict[str, Any]) -> Buffer:
    return Buffer(d.get("values", []), word_bits=d.get("word_bits"))


def buffer_to_yaml(buffer: Buffer) -> str:
    return yaml.safe_dump(buffer_to_dict(buffer))


def buffer_from_yaml(s: str) -> Buffer:
    return buffer_from_dict(yaml.safe_load(s) or {})


def registry_to_dict(registry: DispatchRegistry) -> Dict[str, Any]:
    return {
        "pending": [
            {"kind": item.kind, "description": item.describe(), "state": item.state.value}
            for item in registry.pending_items()
        ]
    }


def registry_to_yaml(registry: DispatchRegistry) -> str:
    return yaml.safe_dump(registry_to_dict(registry))
