"""
Term Lattice

A query is held as a DAG of alternative token sequences. Nodes carry no
payload, edges carry one term label each. The lattice is built once from a
linear chain of labels, extended with parallel alternative paths and
finally has edges marked as deleted.
"""

from dataclasses import dataclass, field
from typing import Dict, Generic, Hashable, Iterable, List, Set, TypeVar

L = TypeVar("L", bound=Hashable)


class LatticeError(ValueError):
    pass


class LabelNotFoundError(LatticeError, KeyError):
    pass


class AmbiguousLabelError(LatticeError):
    pass


class InvalidSpanError(LatticeError):
    pass


@dataclass(eq=False)
class Node:
    """A lattice vertex. Outgoing edges keep attachment order."""
    outgoing: List["Edge"] = field(default_factory=list)
    incoming: Set["Edge"] = field(default_factory=set)


@dataclass(eq=False)
class Edge(Generic[L]):
    """A directed arc carrying one term label"""
    source: Node
    target: Node
    label: L
    deleted: bool = False

    def __repr__(self) -> str:
        flag = ", deleted" if self.deleted else ""
        return f"Edge({self.label!r}{flag})"


class TermLattice(Generic[L]):
    """
    Owning container of all nodes and edges of one query lattice.

    Labels are unique within a lattice; every builder call that would break
    this raises AmbiguousLabelError before touching the graph.
    """

    def __init__(self):
        self._nodes: List[Node] = [Node()]
        self._edges: List[Edge[L]] = []
        self._by_label: Dict[L, Edge[L]] = {}

    @classmethod
    def build(cls, labels: Iterable[L]) -> "TermLattice[L]":
        """
        Create a linear chain lattice.

        Args:
            labels: Ordered term labels. An empty sequence gives a single
                node and no edges.

        Returns:
            TermLattice with len(labels) edges and len(labels) + 1 nodes
        """
        labels = list(labels)
        lattice = cls()
        lattice._check_new_labels(labels)

        current = lattice.source
        for label in labels:
            nxt = lattice._new_node()
            lattice._connect(current, nxt, label)
            current = nxt
        return lattice

    @property
    def source(self) -> Node:
        """First node of the initial chain"""
        return self._nodes[0]

    def edges(self) -> List[Edge[L]]:
        """All edges, deleted and live, in creation order"""
        return list(self._edges)

    def live_edges(self) -> List[Edge[L]]:
        return [e for e in self._edges if not e.deleted]

    def nodes(self) -> List[Node]:
        return list(self._nodes)

    def edge(self, label: L) -> Edge[L]:
        """Resolve the unique edge carrying a label"""
        try:
            return self._by_label[label]
        except KeyError:
            raise LabelNotFoundError(f"No edge labeled {label!r}") from None

    def __contains__(self, label) -> bool:
        return label in self._by_label

    def __len__(self) -> int:
        return len(self._edges)

    def insert_parallel_path(self, span_start: L, span_end: L, path_labels: Iterable[L]) -> List[Edge[L]]:
        """
        Add an alternative chain between two existing locations.

        The chain runs from the source node of the edge labeled span_start to
        the target node of the edge labeled span_end. Both labels may name
        the same edge.

        Args:
            span_start: Label of the edge whose source starts the span
            span_end: Label of the edge whose target ends the span
            path_labels: Labels of the new edges, in order

        Returns:
            The newly created edges in creation order
        """
        path_labels = list(path_labels)
        start = self.edge(span_start).source
        end = self.edge(span_end).target

        if not path_labels:
            raise InvalidSpanError("A parallel path needs at least one label")
        self._check_new_labels(path_labels)
        if not self._reaches(start, end):
            raise InvalidSpanError(
                f"Span {span_start!r}..{span_end!r} does not run forward through the lattice"
            )

        created = []
        current = start
        for i, label in enumerate(path_labels):
            nxt = end if i == len(path_labels) - 1 else self._new_node()
            created.append(self._connect(current, nxt, label))
            current = nxt
        return created

    def mark_deleted(self, label: L) -> Edge[L]:
        """Flag the edge carrying label as deleted. The graph keeps its shape."""
        edge = self.edge(label)
        edge.deleted = True
        return edge

    def _new_node(self) -> Node:
        node = Node()
        self._nodes.append(node)
        return node

    def _connect(self, source: Node, target: Node, label: L) -> Edge[L]:
        edge = Edge(source=source, target=target, label=label)
        source.outgoing.append(edge)
        target.incoming.add(edge)
        self._edges.append(edge)
        self._by_label[label] = edge
        return edge

    def _check_new_labels(self, labels: List[L]) -> None:
        seen = set()
        for label in labels:
            if label in self._by_label or label in seen:
                raise AmbiguousLabelError(f"Label {label!r} is already used in this lattice")
            seen.add(label)

    def _reaches(self, start: Node, end: Node) -> bool:
        """True if end is reachable from start over at least one edge"""
        stack = [e.target for e in start.outgoing]
        visited: Set[Node] = set()
        while stack:
            node = stack.pop()
            if node is end:
                return True
            if node in visited:
                continue
            visited.add(node)
            stack.extend(e.target for e in node.outgoing)
        return False
