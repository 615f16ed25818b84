"""
Tests for converting query trees into request maps.
"""

import pytest
from querygraph.query.converter import (
    ConversionError,
    ConverterConfig,
    QueryConfig,
    QueryMapConverter,
)
from querygraph.query.model import (
    BooleanQuery,
    BoostedTerm,
    BoostQuery,
    DisjunctionMaxQuery,
    ExpandedQuery,
    MatchAllQuery,
    Occur,
    RawQuery,
    Term,
    bq,
    dmq,
)


def term_map(field, value, boost):
    return {"term": {"f": field, "query": value, "boost": boost}}


def dmq_map(*queries, tie=None):
    body = {"queries": list(queries)}
    if tie is not None:
        body["tie"] = tie
    return {"dis_max": body}


def convert(node, query_config):
    return QueryMapConverter(
        query_config=query_config,
        converter_config=ConverterConfig.default_config(),
        node=node,
        parse_as_user_query=True
    ).convert()


class TestLeaves:

    def test_match_all(self):
        config = QueryConfig.builder().field("f", 1.0).build()

        assert convert(MatchAllQuery(), config) == {"lucene": {"v": "*:*"}}

    def test_raw_query_is_passed_through(self):
        config = QueryConfig.builder().field("f", 1.0).build()

        assert convert(RawQuery("type:iphone"), config) == "type:iphone"

    def test_field_weight_is_scaled_by_term_boost(self):
        config = QueryConfig.builder().field("f", 20.0).build()
        node = DisjunctionMaxQuery([BoostedTerm("iphone", boost=0.5)])

        assert convert(node, config) == dmq_map(term_map("f", "iphone", 10.0))

    def test_fielded_term_uses_its_field_only(self):
        config = QueryConfig.builder().field("brand", 30.0).field("type", 50.0).build()
        node = DisjunctionMaxQuery([Term("apple", field="brand"), Term("apple", field="color")])

        assert convert(node, config) == dmq_map(
            term_map("brand", "apple", 30.0),
            term_map("color", "apple", 1.0),
        )


class TestDisjunctionMax:

    def test_tie_is_added(self):
        config = QueryConfig.builder().tie(0.5).field("f", 1.0).build()

        assert convert(dmq("iphone"), config) == dmq_map(term_map("f", "iphone", 1.0), tie=0.5)

    def test_terms_expand_over_fields(self):
        config = QueryConfig.builder().field("brand", 30.0).field("type", 50.0).build()

        assert convert(dmq("iphone"), config) == dmq_map(
            term_map("brand", "iphone", 30.0),
            term_map("type", "iphone", 50.0),
        )


class TestBoolean:

    def test_terms_expand_within_each_dmq(self):
        config = QueryConfig.builder().field("brand", 30.0).field("type", 50.0).build()

        assert convert(bq("iphone", "12"), config) == {"bool": {"should": [
            dmq_map(term_map("brand", "iphone", 30.0), term_map("type", "iphone", 50.0)),
            dmq_map(term_map("brand", "12", 30.0), term_map("type", "12", 50.0)),
        ]}}

    def test_minimum_should_match_only_on_root(self):
        config = QueryConfig.builder().field("f", 1.0).minimum_should_match("100%").build()
        node = BooleanQuery(clauses=[
            DisjunctionMaxQuery([
                Term("iphone"),
                BooleanQuery(
                    clauses=[
                        dmq("apple", occur=Occur.MUST, generated=True),
                        dmq("smartphone", occur=Occur.MUST, generated=True),
                    ],
                    occur=Occur.MUST,
                    generated=True
                ),
            ]),
            dmq("12"),
        ])

        assert convert(node, config) == {"bool": {
            "should": [
                dmq_map(
                    term_map("f", "iphone", 1.0),
                    {"bool": {
                        "must": [
                            dmq_map(term_map("f", "apple", 1.0)),
                            dmq_map(term_map("f", "smartphone", 1.0)),
                        ],
                        "boost": 0.5,
                    }},
                ),
                dmq_map(term_map("f", "12", 1.0)),
            ],
            "mm": "100%",
        }}

    def test_no_minimum_should_match_outside_user_query(self):
        config = QueryConfig.builder().field("f", 1.0).minimum_should_match("2").build()
        converter = QueryMapConverter(config, node=bq("a", "b"), parse_as_user_query=False)

        assert "mm" not in converter.convert()["bool"]

    def test_clauses_are_grouped_by_occur(self):
        config = QueryConfig.builder().field("f", 1.0).build()
        node = BooleanQuery(clauses=[
            dmq("a", occur=Occur.MUST),
            dmq("b", occur=Occur.MUST_NOT),
            dmq("c"),
        ])

        assert convert(node, config) == {"bool": {
            "must": [dmq_map(term_map("f", "a", 1.0))],
            "must_not": [dmq_map(term_map("f", "b", 1.0))],
            "should": [dmq_map(term_map("f", "c", 1.0))],
        }}


class TestExpandedQuery:

    def test_boost_queries_are_converted(self):
        config = QueryConfig.builder().field("f", 2.0).build()
        expanded = ExpandedQuery(
            user_query=bq("phone"),
            boost_up=[BoostQuery(query=dmq("apple"), boost=100.0)],
            boost_down=[BoostQuery(query=dmq("refurbished"), boost=50.0)]
        )

        converted = QueryMapConverter(config).convert_expanded(expanded)

        assert converted == {
            "query": {"bool": {"should": [dmq_map(term_map("f", "phone", 2.0))]}},
            "boost_up": [{"query": dmq_map(term_map("f", "apple", 2.0)), "boost": 100.0}],
            "boost_down": [{"query": dmq_map(term_map("f", "refurbished", 2.0)), "boost": 50.0}],
        }


class TestErrors:

    def test_config_needs_fields(self):
        with pytest.raises(ConversionError):
            QueryConfig.builder().build()

    def test_unknown_node(self):
        config = QueryConfig.builder().field("f", 1.0).build()

        with pytest.raises(ConversionError):
            convert(object(), config)

    def test_nothing_to_convert(self):
        config = QueryConfig.builder().field("f", 1.0).build()

        with pytest.raises(ConversionError):
            QueryMapConverter(config).convert()
