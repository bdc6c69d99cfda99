from dataclasses import dataclass


@dataclass
class DoubleOptions:
    """Per-double settings, shared by reference with every runtime of that double."""
    strict: bool = False
