"""Shared utility functions."""
import os
from pathlib import Path
from typing import List, Optional, Tuple


def get_project_root() -> Path:
    """
    Get the project root directory.

    Returns:
        Path to project root
    """
    return Path(__file__).parent.parent


def get_rules_path(filename: str = None) -> Path:
    """
    Get path to the rules directory or a rules file.

    Args:
        filename: Optional rules filename

    Returns:
        Path to rules directory or specific rules file
    """
    rules_dir = get_project_root() / "rules"
    if filename:
        return rules_dir / filename
    return rules_dir


def parse_fields(text: str) -> List[Tuple[str, float]]:
    """
    Parse a field list like "title^2.0,body" into (name, weight) pairs.

    A field without ^weight gets weight 1.0.
    """
    fields = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        name, _, weight = part.partition("^")
        try:
            fields.append((name.strip(), float(weight) if weight else 1.0))
        except ValueError:
            raise ValueError(f"Invalid field weight in {part!r}") from None
    return fields


def _optional_float(value: Optional[str]) -> Optional[float]:
    return float(value) if value else None


class Config:
    """Configuration constants."""

    # Rules
    RULES_PATH = Path(os.getenv("QUERYGRAPH_RULES_PATH", str(get_rules_path("rules.yaml"))))

    # Query building
    FIELDS = parse_fields(os.getenv("QUERYGRAPH_FIELDS", "title^2.0,body^1.0"))
    TIE = _optional_float(os.getenv("QUERYGRAPH_TIE"))
    MINIMUM_SHOULD_MATCH = os.getenv("QUERYGRAPH_MM") or None
    GENERATED_BOOST = float(os.getenv("QUERYGRAPH_GENERATED_BOOST", "0.5"))

    # Search backend
    SEARCH_URL = os.getenv("SEARCH_URL", "http://localhost:8983/solr/products/query")
    SEARCH_TIMEOUT = float(os.getenv("SEARCH_TIMEOUT", "10"))
