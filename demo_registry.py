#!/usr/bin/env python3
"""
Demo: Drain a heterogeneous registry of consume-once items.

Queues "Hello", 55 and two procedures, drains them in order, then
shows what a failed drain leaves behind.
"""

from aliaskit.config import load_config
from aliaskit.consumables import CallableItem, TextItem
from aliaskit.errors import ConsumptionFailed
from aliaskit.examples import build_example_registry
from aliaskit.log import setup_logging_from_config
from aliaskit.registry import DispatchRegistry
from aliaskit.serialization import registry_to_yaml


def main():
    config = load_config()
    setup_logging_from_config(config)

    print("=" * 70)
    print("DISPATCH REGISTRY DEMO")
    print("=" * 70)
    print()

    registry = build_example_registry(emit=print)
    results = registry.drain()
    print(f"\nResults: {results}")
    print(f"Remaining after drain: {len(registry)}")

    def broken():
        raise RuntimeError("disk full")

    registry = DispatchRegistry()
    registry.push(TextItem("before"))
    registry.push(CallableItem(broken))
    registry.push(TextItem("after"))
    try:
        registry.drain()
    except ConsumptionFailed as e:
        print(f"\n{e}")
        print(f"Partial results: {e.results}")
        print("Retained:")
        print(registry_to_yaml(registry))


if __name__ == "__main__":
    main()
