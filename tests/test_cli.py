"""
End-to-end test of the command-line helpers from arguments to request map.
"""

from querygraph.utils import get_rules_path
from querygraph.cli import build_parser, rewrite_to_map


def test_rewrite_to_map_with_shipped_rules():
    parser = build_parser("test")
    args = parser.parse_args([
        "Cheap Notebook",
        "--rules", str(get_rules_path("rules.yaml")),
        "--fields", "title^2",
        "--mm", "100%",
    ])

    request_map = rewrite_to_map(args)

    assert request_map["query"] == {"bool": {
        "should": [{"dis_max": {"queries": [
            {"term": {"f": "title", "query": "notebook", "boost": 2.0}},
            {"term": {"f": "title", "query": "laptop", "boost": 2.0}},
        ]}}],
        "mm": "100%",
    }}
    assert request_map["boost_down"] == [{
        "query": {"dis_max": {"queries": [{"term": {"f": "title", "query": "refurbished", "boost": 2.0}}]}},
        "boost": 50.0,
    }]
    assert request_map["boost_up"] == []


def test_stages_run_in_flag_order(tmp_path):
    first = tmp_path / "first.yaml"
    first.write_text("rules:\n  - input: tv\n    synonyms: [television]\n")
    second = tmp_path / "second.yaml"
    second.write_text("rules:\n  - input: television\n    delete: true\n")

    args = build_parser("test").parse_args(
        ["tv", "--rules", str(first), "--rules", str(second), "--fields", "f"]
    )

    assert rewrite_to_map(args)["query"] == {"bool": {"should": [
        {"dis_max": {"queries": [{"term": {"f": "f", "query": "tv", "boost": 1.0}}]}}
    ]}}
