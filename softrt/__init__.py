"""Software floating-point, conversion, sub-word atomic and memory helper routines."""

__version__ = "0.1.0"

__all__ = [
    "formats",
    "compare",
    "extend",
    "trunc",
    "add",
    "mul",
    "div",
    "pow",
    "conv",
    "atomics",
    "aeabi",
]