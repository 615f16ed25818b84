"""
Term lattice package.

This package provides:
- Node and Edge primitives
- TermLattice construction (chains, parallel paths, deletion marks)
"""

from .model import (
    AmbiguousLabelError,
    Edge,
    InvalidSpanError,
    LabelNotFoundError,
    LatticeError,
    Node,
    TermLattice,
)

__all__ = [
    'AmbiguousLabelError',
    'Edge',
    'InvalidSpanError',
    'LabelNotFoundError',
    'LatticeError',
    'Node',
    'TermLattice',
]
