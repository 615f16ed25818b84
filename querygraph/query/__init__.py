"""
Query tree package.

This package provides:
- Query tree nodes (terms, disjunction-max, boolean, match-all, raw)
- Conversion of a query tree into a search backend request map
"""

from .model import (
    BooleanQuery,
    BoostedTerm,
    BoostQuery,
    DisjunctionMaxQuery,
    ExpandedQuery,
    MatchAllQuery,
    Occur,
    RawQuery,
    Term,
)
from .converter import ConversionError, ConverterConfig, QueryConfig, QueryMapConverter

__all__ = [
    'BooleanQuery',
    'BoostedTerm',
    'BoostQuery',
    'ConversionError',
    'ConverterConfig',
    'DisjunctionMaxQuery',
    'ExpandedQuery',
    'MatchAllQuery',
    'Occur',
    'QueryConfig',
    'QueryMapConverter',
    'RawQuery',
    'Term',
]
