"""
Pytest configuration and fixtures for lattice, traversal and rewrite tests.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from querygraph.lattice.model import TermLattice
from querygraph.rewrite.rules import RuleSet
from querygraph.traversal.engine import StateExchangingTraversal


def _collect_paths(lattice):
    """Traverse with state exchanged on every step, return the joined term paths"""
    traversal = StateExchangingTraversal.of(lattice.edges())
    sequences = []
    for step in traversal:
        sequences.append(" ".join(step.terms))
        traversal.set_exchanged_state(sequences[-1])
    return sequences


@pytest.fixture
def collect_paths():
    """Full-continuation path extractor"""
    return _collect_paths


@pytest.fixture
def branched_lattice():
    """
    O - a - O - b - O - c - O
      \\           /
        d - O - e
    """
    lattice = TermLattice.build(["a", "b", "c"])
    lattice.insert_parallel_path("a", "b", ["d", "e"])
    return lattice


@pytest.fixture
def product_rules():
    """Rule set covering synonyms, deletes and boosts"""
    return RuleSet.from_dict({
        "rules": [
            {"input": "apple smartphone", "synonyms": ["iphone"]},
            {"input": "notebook", "synonyms": ["laptop"]},
            {"input": "cheap", "delete": True,
             "boosts": [{"direction": "down", "weight": 50, "query": "refurbished"}]},
        ]
    }, name="products")
