"""
Rewrite Rule Loader

Loads rules.yaml and indexes rule inputs in a prefix trie so a traversal
can decide, one term at a time, whether a path may still grow into a rule
match.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum


class RuleConfigError(ValueError):
    pass


class BoostDirection(str, Enum):
    """Ranking direction of a boost instruction"""
    UP = "up"
    DOWN = "down"


@dataclass
class BoostInstruction:
    direction: BoostDirection
    weight: float
    query: Tuple[str, ...]


@dataclass
class Rule:
    """Instructions triggered by one input term sequence"""
    input: Tuple[str, ...]
    synonyms: List[Tuple[str, ...]] = field(default_factory=list)
    delete: bool = False
    boosts: List[BoostInstruction] = field(default_factory=list)

    def merge(self, other: "Rule") -> None:
        for synonym in other.synonyms:
            if synonym not in self.synonyms:
                self.synonyms.append(synonym)
        self.delete = self.delete or other.delete
        self.boosts.extend(other.boosts)


@dataclass
class RuleTrieNode:
    children: Dict[str, "RuleTrieNode"] = field(default_factory=dict)
    rule: Optional[Rule] = None

    def child(self, term: str) -> Optional["RuleTrieNode"]:
        return self.children.get(term)


def normalize_terms(text) -> Tuple[str, ...]:
    """Lower-case and whitespace-split a term sequence"""
    if isinstance(text, str):
        return tuple(text.lower().split())
    return tuple(str(t).lower() for t in text)


class RuleSet:
    """
    An ordered collection of rewrite rules.

    Rules sharing the same input are merged into one.
    """

    def __init__(self, rules: Iterable[Rule] = (), name: str = "rules"):
        self.name = name
        self.rules: Dict[Tuple[str, ...], Rule] = {}
        self.root = RuleTrieNode()
        for rule in rules:
            self.add(rule)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "RuleSet":
        """
        Load a rule set from a YAML file.

        Args:
            config_path: Path to a rules file with a top-level 'rules' list

        Returns:
            RuleSet named after the file stem
        """
        config_path = Path(config_path)
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        return cls.from_dict(config, name=config_path.stem)

    @classmethod
    def from_dict(cls, config: Dict[str, Any], name: str = "rules") -> "RuleSet":
        if not isinstance(config, dict):
            raise RuleConfigError("Rule config must be a mapping with a 'rules' list")
        rule_defs = config.get('rules') or []
        if not isinstance(rule_defs, list):
            raise RuleConfigError("'rules' must be a list")
        return cls((_parse_rule(i, d) for i, d in enumerate(rule_defs)), name=name)

    def add(self, rule: Rule) -> None:
        existing = self.rules.get(rule.input)
        if existing is not None:
            existing.merge(rule)
            return

        self.rules[rule.input] = rule
        node = self.root
        for term in rule.input:
            node = node.children.setdefault(term, RuleTrieNode())
        node.rule = rule

    def lookup(self, terms) -> Optional[Rule]:
        """Return the rule whose input equals terms exactly"""
        return self.rules.get(normalize_terms(terms))

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules.values())


def _parse_rule(index: int, rule_def: Any) -> Rule:
    if not isinstance(rule_def, dict):
        raise RuleConfigError(f"rules[{index}] must be a mapping, got {rule_def!r}")

    terms = normalize_terms(rule_def.get('input') or "")
    if not terms:
        raise RuleConfigError(f"rules[{index}] has no input")

    synonyms = rule_def.get('synonyms') or []
    if isinstance(synonyms, str):
        synonyms = [synonyms]
    parsed_synonyms = [normalize_terms(s) for s in synonyms]
    if any(not s for s in parsed_synonyms):
        raise RuleConfigError(f"rules[{index}] has an empty synonym")

    boosts = []
    for boost_def in rule_def.get('boosts') or []:
        try:
            direction = BoostDirection(str(boost_def.get('direction', 'up')).lower())
            weight = float(boost_def.get('weight', 1.0))
        except (AttributeError, ValueError) as e:
            raise RuleConfigError(f"rules[{index}] has an invalid boost: {boost_def!r}") from e
        query = normalize_terms(boost_def.get('query') or "")
        if not query:
            raise RuleConfigError(f"rules[{index}] boost has no query")
        boosts.append(BoostInstruction(direction=direction, weight=weight, query=query))

    rule = Rule(
        input=terms,
        synonyms=parsed_synonyms,
        delete=bool(rule_def.get('delete', False)),
        boosts=boosts
    )
    if not (rule.synonyms or rule.delete or rule.boosts):
        raise RuleConfigError(f"rules[{index}] ({' '.join(terms)}) has no instructions")
    return rule
