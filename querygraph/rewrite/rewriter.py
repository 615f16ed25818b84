"""
Rule Rewriter

Drives a StateExchangingTraversal with a rule trie: a path is extended only
while its term values are a prefix of some rule input. Matches found in one
stage are applied to the lattice (parallel synonym paths, deletion marks)
before the next stage traverses it, and the final lattice is turned into an
expanded query tree.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from ..lattice.model import TermLattice
from ..query.model import (
    BooleanQuery,
    BoostQuery,
    DisjunctionMaxQuery,
    ExpandedQuery,
    MatchAllQuery,
    Occur,
    QueryNode,
    Term,
    bq,
    dmq,
)
from ..traversal.engine import StateExchangingTraversal
from .rules import BoostDirection, Rule, RuleSet, RuleTrieNode


@dataclass(eq=False)
class Token:
    """
    A lattice label. start/end are the original query positions the token
    stands for; generated tokens come from rewriting and know the insertion
    they belong to and their index in it.
    """
    value: str
    start: int
    end: int
    generated: bool = False
    insertion: Optional["Insertion"] = None
    index: int = 0

    def __repr__(self) -> str:
        return f"Token({self.value!r}, {self.start}..{self.end})"


@dataclass(eq=False)
class Insertion:
    """
    A synonym path added to the lattice.

    slots are the first and last original positions it covers when
    container is None, otherwise token indexes of the enclosing insertion.
    """
    tokens: List[Token]
    slots: Tuple[int, int]
    container: Optional["Insertion"] = None
    children: List["Insertion"] = field(default_factory=list)


@dataclass
class Match:
    stage: str
    tokens: Tuple[Token, ...]
    rule: Rule

    @property
    def terms(self) -> Tuple[str, ...]:
        return tuple(t.value for t in self.tokens)

    @property
    def span(self) -> Tuple[int, int]:
        return min(t.start for t in self.tokens), max(t.end for t in self.tokens)


@dataclass
class RewriteResult:
    tokens: List[Token]
    lattice: TermLattice
    expanded_query: ExpandedQuery
    matches: List[Match] = field(default_factory=list)


def tokenize(query: Union[str, Iterable[str]]) -> List[Token]:
    """Split a query on whitespace into lower-cased original tokens"""
    values = query.split() if isinstance(query, str) else list(query)
    return [Token(value.lower(), i, i) for i, value in enumerate(values)]


def _anchors(token: Token, first: bool) -> List[Tuple[Optional[Insertion], int]]:
    """
    Places a match endpoint can be attached at, innermost first.

    A generated token anchors in its own insertion. It also anchors one level
    up when it is the first (or last) token of that insertion.
    """
    container, slot = token.insertion, token.index
    if container is None:
        return [(None, token.start)]
    anchors = []
    while container is not None:
        anchors.append((container, slot))
        if slot != (0 if first else len(container.tokens) - 1):
            return anchors
        slot = container.slots[0] if first else container.slots[1]
        container = container.container
    anchors.append((None, slot))
    return anchors


def _placement(tokens: Sequence[Token]) -> Optional[Tuple[Optional[Insertion], Tuple[int, int]]]:
    """Outermost container both ends of a matched path anchor in, with its slots"""
    ends = dict(_anchors(tokens[-1], first=False))
    for container, start in reversed(_anchors(tokens[0], first=True)):
        if container in ends:
            return container, (start, ends[container])
    return None


class RuleRewriter:
    """
    Applies one or more rule sets, in order, to a query.

    Args:
        rule_sets: A RuleSet or an ordered sequence of them (one stage each)
        debug: Print the matches found in each stage
    """

    def __init__(self, rule_sets: Union[RuleSet, Sequence[RuleSet]], debug: bool = False):
        if isinstance(rule_sets, RuleSet):
            rule_sets = [rule_sets]
        self.rule_sets: List[RuleSet] = list(rule_sets)
        self.debug = debug

    def rewrite(self, query: Union[str, Iterable[str]]) -> RewriteResult:
        tokens = tokenize(query)
        lattice: TermLattice[Token] = TermLattice.build(tokens)
        insertions: List[Insertion] = []
        boost_up: List[BoostQuery] = []
        boost_down: List[BoostQuery] = []
        all_matches: List[Match] = []

        for rule_set in self.rule_sets:
            matches = self.find_matches(lattice, rule_set)

            if self.debug:
                print(f"\n🔍 DEBUG: stage '{rule_set.name}' matched {len(matches)} rule(s)")
                for match in matches:
                    print(f"  {' '.join(match.terms)} @ {match.span}")

            for match in matches:
                self._apply(lattice, match, insertions, boost_up, boost_down)
            all_matches.extend(matches)

        expanded = ExpandedQuery(
            user_query=self._build_user_query(lattice, tokens, insertions),
            boost_up=boost_up,
            boost_down=boost_down
        )
        return RewriteResult(tokens=tokens, lattice=lattice, expanded_query=expanded, matches=all_matches)

    def find_matches(self, lattice: TermLattice, rule_set: RuleSet) -> List[Match]:
        """
        Collect every lattice path whose term values equal a rule input.

        The trie node reached by a path is exchanged with the traversal, so
        only paths that can still grow into a rule input are extended. Deleted
        edges that converge on one node lead to the same path more than once;
        each path is matched and extended only the first time.
        """
        traversal = StateExchangingTraversal.of(lattice.edges())
        continued: Dict[Tuple[Token, ...], RuleTrieNode] = {}
        seen: Set[Tuple[Token, ...]] = set()
        matches = []

        for step in traversal:
            if step.terms in seen:
                continue
            seen.add(step.terms)

            parent = rule_set.root if len(step.terms) == 1 else continued[step.terms[:-1]]
            node = parent.child(step.label.value)
            if node is None:
                continue
            if node.rule is not None:
                matches.append(Match(stage=rule_set.name, tokens=step.terms, rule=node.rule))
            if node.children:
                continued[step.terms] = node
                traversal.set_exchanged_state(node, step)

        return matches

    def _apply(
        self,
        lattice: TermLattice,
        match: Match,
        insertions: List[Insertion],
        boost_up: List[BoostQuery],
        boost_down: List[BoostQuery]
    ):
        if match.rule.synonyms:
            placement = _placement(match.tokens)
            if placement is None:
                if self.debug:
                    print(f"  skipped synonyms of {' '.join(match.terms)}: path crosses a synonym boundary")
            else:
                self._insert_synonyms(lattice, match, placement, insertions)

        if match.rule.delete:
            for token in match.tokens:
                lattice.mark_deleted(token)

        for boost in match.rule.boosts:
            query = dmq(*boost.query) if len(boost.query) == 1 else bq(*boost.query, occur=Occur.MUST)
            target = boost_up if boost.direction == BoostDirection.UP else boost_down
            target.append(BoostQuery(query=query, boost=boost.weight))

    def _insert_synonyms(
        self,
        lattice: TermLattice,
        match: Match,
        placement: Tuple[Optional[Insertion], Tuple[int, int]],
        insertions: List[Insertion]
    ):
        container, slots = placement
        start, end = match.span
        siblings = insertions if container is None else container.children

        for synonym in match.rule.synonyms:
            insertion = Insertion(tokens=[], slots=slots, container=container)
            insertion.tokens = [
                Token(value, start, end, generated=True, insertion=insertion, index=i)
                for i, value in enumerate(synonym)
            ]
            lattice.insert_parallel_path(match.tokens[0], match.tokens[-1], insertion.tokens)
            siblings.append(insertion)

    def _build_user_query(
        self,
        lattice: TermLattice,
        tokens: List[Token],
        insertions: List[Insertion]
    ) -> QueryNode:
        clauses: Dict[int, List[QueryNode]] = {i: [] for i in range(len(tokens))}

        for i, token in enumerate(tokens):
            if not lattice.edge(token).deleted:
                clauses[i].append(Term(token.value))
        self._attach(lattice, insertions, clauses)

        dmqs = [DisjunctionMaxQuery(clauses[i]) for i in range(len(tokens)) if clauses[i]]
        if not dmqs:
            return MatchAllQuery()
        return BooleanQuery(clauses=dmqs)

    def _attach(self, lattice: TermLattice, insertions: List[Insertion], clauses: Dict[int, List[QueryNode]]):
        for insertion in insertions:
            node = self._build_insertion(lattice, insertion)
            if node is None:
                continue
            start, end = insertion.slots
            for slot in range(start, end + 1):
                clauses[slot].append(node)

    def _build_insertion(self, lattice: TermLattice, insertion: Insertion) -> Optional[QueryNode]:
        """
        A single live term over one slot becomes a generated term. Anything
        else becomes a generated MUST boolean query with one disjunction per
        token, holding the token and the synonyms nested under it.
        """
        live = [t for t in insertion.tokens if not lattice.edge(t).deleted]
        start, end = insertion.slots
        if start == end and len(live) == 1 and not insertion.children:
            return Term(live[0].value, generated=True)

        clauses: Dict[int, List[QueryNode]] = {i: [] for i in range(len(insertion.tokens))}
        for i, token in enumerate(insertion.tokens):
            if not lattice.edge(token).deleted:
                clauses[i].append(Term(token.value, generated=True))
        self._attach(lattice, insertion.children, clauses)

        dmqs = [
            DisjunctionMaxQuery(clauses[i], occur=Occur.MUST, generated=True)
            for i in range(len(insertion.tokens)) if clauses[i]
        ]
        if not dmqs:
            return None
        return BooleanQuery(clauses=dmqs, occur=Occur.MUST, generated=True)
