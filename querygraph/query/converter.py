"""
Query Map Converter

Renders a query tree into a nested map in the shape of a JSON query DSL
request: terms are expanded over the configured fields with their weights,
disjunction-max queries carry the tie-breaker and the root boolean query
carries the minimum-should-match setting.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .model import (
    BooleanQuery,
    BoostedTerm,
    BoostQuery,
    DisjunctionMaxQuery,
    ExpandedQuery,
    MatchAllQuery,
    QueryNode,
    RawQuery,
    Term,
)

MATCH_ALL = {"lucene": {"v": "*:*"}}


class ConversionError(TypeError):
    pass


@dataclass
class QueryConfig:
    """Search fields with weights plus dismax / bool settings"""
    fields: List[Tuple[str, float]]
    tie: Optional[float] = None
    minimum_should_match: Optional[str] = None

    def __post_init__(self):
        if not self.fields:
            raise ConversionError("QueryConfig needs at least one field")

    @staticmethod
    def builder() -> "QueryConfigBuilder":
        return QueryConfigBuilder()


class QueryConfigBuilder:
    def __init__(self):
        self._fields: List[Tuple[str, float]] = []
        self._tie: Optional[float] = None
        self._mm: Optional[str] = None

    def field(self, name: str, weight: float = 1.0) -> "QueryConfigBuilder":
        self._fields.append((name, float(weight)))
        return self

    def tie(self, tie: float) -> "QueryConfigBuilder":
        self._tie = tie
        return self

    def minimum_should_match(self, mm: str) -> "QueryConfigBuilder":
        self._mm = mm
        return self

    def build(self) -> QueryConfig:
        return QueryConfig(fields=list(self._fields), tie=self._tie, minimum_should_match=self._mm)


@dataclass
class ConverterConfig:
    generated_boost: float = 0.5  # boost of nested boolean queries added by rewriting

    @classmethod
    def default_config(cls) -> "ConverterConfig":
        return cls()


class QueryMapConverter:
    """
    Converts one query node into a map.

    Args:
        query_config: Fields, tie and minimum-should-match
        converter_config: Converter-level settings
        node: Root of the query tree to convert
        parse_as_user_query: Treat node as the user query, so a root
            boolean query gets minimum-should-match
    """

    def __init__(
        self,
        query_config: QueryConfig,
        converter_config: Optional[ConverterConfig] = None,
        node: Optional[QueryNode] = None,
        parse_as_user_query: bool = True
    ):
        self.query_config = query_config
        self.converter_config = converter_config or ConverterConfig.default_config()
        self.node = node
        self.parse_as_user_query = parse_as_user_query

    def convert(self, node: Optional[QueryNode] = None) -> Any:
        node = self.node if node is None else node
        if node is None:
            raise ConversionError("Nothing to convert")
        return self._convert(node, is_root=self.parse_as_user_query)

    def convert_expanded(self, expanded_query: ExpandedQuery) -> Dict[str, Any]:
        """Convert the user query together with its boost queries"""
        return {
            "query": self._convert(expanded_query.user_query, is_root=self.parse_as_user_query),
            "boost_up": [self._convert_boost(b) for b in expanded_query.boost_up],
            "boost_down": [self._convert_boost(b) for b in expanded_query.boost_down],
        }

    def _convert_boost(self, boost_query: BoostQuery) -> Dict[str, Any]:
        return {
            "query": self._convert(boost_query.query, is_root=False),
            "boost": boost_query.boost,
        }

    def _convert(self, node: QueryNode, is_root: bool = False) -> Any:
        if isinstance(node, MatchAllQuery):
            return dict(MATCH_ALL)
        if isinstance(node, RawQuery):
            return node.query
        if isinstance(node, BooleanQuery):
            return self._convert_bool(node, is_root)
        if isinstance(node, DisjunctionMaxQuery):
            return self._convert_dmq(node)
        if isinstance(node, Term):
            queries = self._convert_term(node)
            return queries[0] if len(queries) == 1 else self._dmq_map(queries)
        raise ConversionError(f"Cannot convert query node of type {type(node).__name__}")

    def _convert_bool(self, node: BooleanQuery, is_root: bool) -> Dict[str, Any]:
        grouped: Dict[str, List[Any]] = {}
        for clause in node.clauses:
            occur = getattr(clause, "occur", None)
            key = occur.value if occur is not None else "should"
            grouped.setdefault(key, []).append(self._convert(clause))

        body: Dict[str, Any] = dict(grouped)
        if is_root and self.query_config.minimum_should_match is not None:
            body["mm"] = self.query_config.minimum_should_match
        if node.generated:
            body["boost"] = self.converter_config.generated_boost
        return {"bool": body}

    def _convert_dmq(self, node: DisjunctionMaxQuery) -> Dict[str, Any]:
        queries: List[Any] = []
        for clause in node.clauses:
            if isinstance(clause, Term):
                queries.extend(self._convert_term(clause))
            else:
                queries.append(self._convert(clause))
        return self._dmq_map(queries)

    def _dmq_map(self, queries: List[Any]) -> Dict[str, Any]:
        body: Dict[str, Any] = {"queries": queries}
        if self.query_config.tie is not None:
            body["tie"] = self.query_config.tie
        return {"dis_max": body}

    def _convert_term(self, term: Term) -> List[Dict[str, Any]]:
        boost = term.boost if isinstance(term, BoostedTerm) else 1.0
        fields = self.query_config.fields
        if term.field is not None:
            fields = [(name, weight) for name, weight in fields if name == term.field] or [(term.field, 1.0)]
        return [term_map(name, term.value, weight * boost) for name, weight in fields]


def term_map(field_name: str, value: str, boost: float) -> Dict[str, Any]:
    return {"term": {"f": field_name, "query": value, "boost": boost}}
