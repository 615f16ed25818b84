"""Query tree produced by the rewriter and consumed by converters."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class Occur(str, Enum):
    """Boolean clause occurrence"""
    SHOULD = "should"
    MUST = "must"
    MUST_NOT = "must_not"


@dataclass
class Term:
    value: str
    field: Optional[str] = None  # restrict to one field, None = all configured fields
    generated: bool = False


@dataclass
class BoostedTerm(Term):
    boost: float = 1.0


@dataclass
class DisjunctionMaxQuery:
    clauses: List["QueryNode"] = field(default_factory=list)
    occur: Occur = Occur.SHOULD
    generated: bool = False


@dataclass
class BooleanQuery:
    clauses: List["QueryNode"] = field(default_factory=list)
    occur: Occur = Occur.SHOULD
    generated: bool = False


@dataclass
class MatchAllQuery:
    pass


@dataclass
class RawQuery:
    query: str


QueryNode = Union[Term, DisjunctionMaxQuery, BooleanQuery, MatchAllQuery, RawQuery]


@dataclass
class BoostQuery:
    """A query added to the ranking with a positive (up) or negative (down) weight"""
    query: QueryNode
    boost: float


@dataclass
class ExpandedQuery:
    user_query: QueryNode
    boost_up: List[BoostQuery] = field(default_factory=list)
    boost_down: List[BoostQuery] = field(default_factory=list)


def dmq(*terms: str, occur: Occur = Occur.SHOULD, generated: bool = False) -> DisjunctionMaxQuery:
    """Shorthand for a disjunction-max query over plain terms"""
    return DisjunctionMaxQuery(
        clauses=[Term(t, generated=generated) for t in terms],
        occur=occur,
        generated=generated,
    )


def bq(*terms: str, occur: Occur = Occur.SHOULD, generated: bool = False) -> BooleanQuery:
    """Shorthand for a boolean query with one disjunction-max clause per term"""
    return BooleanQuery(
        clauses=[dmq(t, occur=occur, generated=generated) for t in terms],
        occur=occur,
        generated=generated,
    )
