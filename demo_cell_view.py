#!/usr/bin/env python3
"""
Demo: Mix two words of one buffer through a Projected Cell View.

Runs the canonical [0, 3] example, then a small mixing network and
prints it as YAML.
"""

from aliaskit.cells import Buffer
from aliaskit.config import load_config
from aliaskit.examples import build_example_network
from aliaskit.kernels import alternating_mask, apply_steps
from aliaskit.log import get_logger, setup_logging_from_config
from aliaskit.serialization import steps_to_yaml

logger = get_logger("demo_cell_view")


def main():
    config = load_config()
    setup_logging_from_config(config)

    print("=" * 70)
    print("PROJECTED CELL VIEW DEMO")
    print("=" * 70)

    buf = Buffer.zeros(2, word_bits=64)
    buf[1] = 3
    with buf.view() as view:
        view.transform(0, 1, 1, alternating_mask(1))
    print(f"\ntransform(0, 1, shift=1, mask=0x5555...) on [0, 3] -> {buf.to_list()}")

    steps = build_example_network()
    buf = Buffer([0x0123456789ABCDEF, 0xFEDCBA9876543210, 0x0F0F0F0F0F0F0F0F, 0x1])
    print("\nNetwork:")
    print(steps_to_yaml(steps))
    with buf.view() as view:
        applied = apply_steps(view, steps)
    logger.info("Applied %d steps", applied)
    print("Result:")
    for value in buf.to_list():
        print(f"  0x{value:016X}")


if __name__ == "__main__":
    main()
