#!/usr/bin/env python3
"""Rewrite a query and send it to the search backend."""
import sys
import json
from pathlib import Path

import requests

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from querygraph.cli import build_parser, rewrite_to_map
from querygraph.utils import Config


def main():
    """Rewrite a query, POST it to the backend and print the top hits."""
    parser = build_parser("Rewrite a search query and run it against the search backend.")
    parser.add_argument(
        "--url",
        default=Config.SEARCH_URL,
        help=f"Search endpoint accepting a JSON request (default: {Config.SEARCH_URL})"
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=10,
        help="Number of results to return (default: 10)"
    )
    args = parser.parse_args()

    request_map = rewrite_to_map(args)
    print(f"\n🔍 Query: {args.query}")
    if args.debug:
        print(json.dumps(request_map, indent=2))

    try:
        response = requests.post(
            args.url,
            json={"query": request_map["query"], "limit": args.top_n, "params": {
                "boost_up": request_map["boost_up"],
                "boost_down": request_map["boost_down"],
            }},
            timeout=Config.SEARCH_TIMEOUT
        )
        response.raise_for_status()
    except requests.RequestException as e:
        print(f"❌ Search request failed: {e}")
        sys.exit(1)

    docs = response.json().get("response", {}).get("docs", [])

    print("\n" + "=" * 80)
    print("RESULTS")
    print("=" * 80)
    for doc in docs:
        print(f"\n{doc.get('id', '?'):10} | Score: {doc.get('score', 0.0):.4f}")
        print(f"Title: {doc.get('title', '')}")


if __name__ == "__main__":
    main()
