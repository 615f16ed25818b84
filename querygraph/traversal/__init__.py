"""
Lattice traversal package.

This package provides:
- Pull-based, state-exchanging DFS over lattice edges
- Transparent bypass of deleted edges
"""

from .engine import StaleStepError, StateExchangingTraversal, TraversalStateError, TraversalStep

__all__ = ['StaleStepError', 'StateExchangingTraversal', 'TraversalStateError', 'TraversalStep']
