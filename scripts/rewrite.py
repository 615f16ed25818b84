#!/usr/bin/env python3
"""Rewrite a query with the configured rules and print the request map."""
import sys
import json
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from querygraph.cli import build_parser, rewrite_to_map


def main():
    """Rewrite a query and print the converted request map."""
    parser = build_parser("Rewrite a search query with synonym, delete and boost rules.")
    args = parser.parse_args()

    print(json.dumps(rewrite_to_map(args), indent=2))


if __name__ == "__main__":
    main()
