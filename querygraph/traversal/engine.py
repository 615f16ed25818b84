"""
State-Exchanging Graph Traversal

Pull-based DFS over the edges of a term lattice. Every call to advance()
yields one step: a contiguous, deletion-free path of terms. A path is only
extended past its current edge when the caller records exchanged state for
that step, so the exponential set of lattice paths is never materialized.
"""

from dataclasses import dataclass
from typing import Any, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from ..lattice.model import Edge, Node

L = TypeVar("L")
S = TypeVar("S")

_UNSET = object()


class TraversalStateError(RuntimeError):
    pass


class StaleStepError(TraversalStateError):
    pass


@dataclass(frozen=True)
class TraversalStep(Generic[L]):
    """Immutable snapshot of the cursor after one advance()"""
    index: int
    edge: Optional[Edge[L]]
    terms: Tuple[L, ...]
    finished: bool

    @property
    def label(self) -> Optional[L]:
        return self.edge.label if self.edge is not None else None


@dataclass(frozen=True)
class _PendingTask(Generic[L]):
    """Root task when parent_terms is empty, continuation task otherwise"""
    edge: Edge[L]
    parent_terms: Tuple[L, ...] = ()

    def terms(self) -> Tuple[L, ...]:
        return self.parent_terms + (self.edge.label,)


def live_successors(node: Node) -> List[Edge]:
    """
    Resolve the live edges a path may continue with from a node.

    Outgoing edges are visited in attachment order. A deleted edge is
    replaced by the live successors of its target, recursively, so chains
    of deleted edges fan out across every branch they reach. Dead ends
    contribute nothing.
    """
    resolved = []
    stack = list(reversed(node.outgoing))
    while stack:
        edge = stack.pop()
        if edge.deleted:
            stack.extend(reversed(edge.target.outgoing))
        else:
            resolved.append(edge)
    return resolved


class StateExchangingTraversal(Generic[L, S]):
    """
    Single-cursor traversal over a lattice's edges.

    Every non-deleted edge is the root of its own path, in creation order.
    After a step, the caller may record exchanged state; only then does the
    next advance() push the continuations of that step, which are fully
    explored depth-first before any sibling branch or later root.

    The engine never looks at the exchanged state value, only at whether
    one was recorded for the current step. None is a valid value.

    Not thread-safe: one traversal is owned by one caller.
    """

    def __init__(self, edges: Iterable[Edge[L]]):
        self._stack: List[_PendingTask[L]] = [
            _PendingTask(edge) for edge in reversed(list(edges)) if not edge.deleted
        ]
        self._current: Optional[TraversalStep[L]] = None
        self._state: Any = _UNSET
        self._steps = 0

    @classmethod
    def of(cls, edges: Iterable[Edge[L]]) -> "StateExchangingTraversal[L, S]":
        return cls(edges)

    @property
    def current_step(self) -> Optional[TraversalStep[L]]:
        """The most recent step, or None before the first advance()"""
        return self._current

    def current_edge(self) -> Optional[Edge[L]]:
        if self._current is None:
            return None
        return self._current.edge

    def path_terms(self) -> Tuple[L, ...]:
        if self._current is None:
            return ()
        return self._current.terms

    def is_finished(self) -> bool:
        return self._current is not None and self._current.finished

    @property
    def exchanged_state(self) -> Optional[S]:
        """Value recorded for the current step, None if nothing was recorded"""
        return None if self._state is _UNSET else self._state

    def has_exchanged_state(self) -> bool:
        return self._state is not _UNSET

    def set_exchanged_state(self, value: S, step: Optional[TraversalStep[L]] = None) -> None:
        """
        Record state for the current step, asking the next advance() to
        extend the current path.

        Args:
            value: Opaque caller state
            step: Optional step the state belongs to. Must be the current
                step; older snapshots are rejected.
        """
        if self._current is None:
            raise TraversalStateError("No step to exchange state with before the first advance()")
        if step is not None and step is not self._current:
            raise StaleStepError(
                f"Step {step.index} is not the current step ({self._current.index})"
            )
        if self._current.finished:
            raise TraversalStateError("Traversal is finished")
        self._state = value

    def advance(self) -> TraversalStep[L]:
        """
        Move the cursor to the next pending path.

        Returns:
            The new current step. Once the stack is exhausted a finished step
            is returned, and every further call returns it again.
        """
        if self.is_finished():
            return self._current

        if self._state is not _UNSET:
            self._push_continuations(self._current)
        self._state = _UNSET

        self._steps += 1
        if not self._stack:
            self._current = TraversalStep(index=self._steps, edge=None, terms=(), finished=True)
        else:
            task = self._stack.pop()
            self._current = TraversalStep(
                index=self._steps,
                edge=task.edge,
                terms=task.terms(),
                finished=False,
            )
        return self._current

    def __iter__(self) -> Iterator[TraversalStep[L]]:
        """Yield steps until the traversal finishes. The finished step is not yielded."""
        while True:
            step = self.advance()
            if step.finished:
                return
            yield step

    def _push_continuations(self, step: TraversalStep[L]) -> None:
        for edge in reversed(live_successors(step.edge.target)):
            self._stack.append(_PendingTask(edge, step.terms))
