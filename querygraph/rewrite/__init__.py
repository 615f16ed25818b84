"""
Rule-based query rewriting package.

This package provides:
- YAML rule loading into a prefix trie
- A rewriter that drives the lattice traversal with the rule trie
"""

from .rules import BoostDirection, BoostInstruction, Rule, RuleConfigError, RuleSet
from .rewriter import Match, RewriteResult, RuleRewriter, Token, tokenize

__all__ = [
    'BoostDirection',
    'BoostInstruction',
    'Match',
    'RewriteResult',
    'Rule',
    'RuleConfigError',
    'RuleRewriter',
    'RuleSet',
    'Token',
    'tokenize',
]
