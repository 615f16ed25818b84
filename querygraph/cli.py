"""
Command-line helpers shared by the rewrite and search scripts.
"""
import argparse
from pathlib import Path

from .query.converter import ConverterConfig, QueryConfig, QueryMapConverter
from .rewrite.rewriter import RuleRewriter
from .rewrite.rules import RuleSet
from .utils import Config, parse_fields


def build_parser(description: str) -> argparse.ArgumentParser:
    """Arguments shared by the rewrite and search scripts."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "query",
        help="Query text to rewrite"
    )
    parser.add_argument(
        "--rules",
        type=Path,
        action="append",
        default=None,
        help=f"Rules file, one rewrite stage per flag in order (default: {Config.RULES_PATH})"
    )
    parser.add_argument(
        "--fields",
        type=parse_fields,
        default=Config.FIELDS,
        help="Search fields with weights, e.g. 'title^2.0,body' (default: QUERYGRAPH_FIELDS)"
    )
    parser.add_argument(
        "--tie",
        type=float,
        default=Config.TIE,
        help="Dismax tie-breaker (default: QUERYGRAPH_TIE)"
    )
    parser.add_argument(
        "--mm",
        default=Config.MINIMUM_SHOULD_MATCH,
        help="Minimum should match for the user query, e.g. '100%%' (default: QUERYGRAPH_MM)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the rule matches of every stage"
    )
    return parser


def rewrite_to_map(args) -> dict:
    """Run the rewriter for parsed arguments and convert the result."""
    rule_paths = args.rules or [Config.RULES_PATH]
    rewriter = RuleRewriter([RuleSet.from_yaml(p) for p in rule_paths], debug=args.debug)
    result = rewriter.rewrite(args.query)

    if args.debug:
        print(f"\n🧩 Lattice: {len(result.lattice)} edges, "
              f"{len(result.lattice.live_edges())} live, {len(result.matches)} matches")

    converter = QueryMapConverter(
        query_config=QueryConfig(fields=args.fields, tie=args.tie, minimum_should_match=args.mm),
        converter_config=ConverterConfig(generated_boost=Config.GENERATED_BOOST)
    )
    return converter.convert_expanded(result.expanded_query)
