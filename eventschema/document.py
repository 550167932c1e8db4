"""Parsed document representation consumed by the resolution core.

Sentence segmentation, tokenization, tagging and dependency parsing all happen
upstream. This module only models their output:

- **DependencyEdge**: A labeled, directed edge between two token positions
- **DependencyGraph**: The edges of one sentence, with path queries
- **Sentence**: Words, lemmas, tags and an optional dependency graph
- **ParsedDocument**: The sentences of one document

Documents are frozen Pydantic models. The only mutable state a document owns is
the lock that serializes in-place modification writes on its mentions.
"""

from __future__ import annotations

import threading
from collections import deque
from contextlib import contextmanager
from typing import Any, Iterator

from pydantic import BaseModel, Field, PrivateAttr, model_validator


class DependencyEdge(BaseModel, frozen=True):
    """A directed dependency edge from `head` to `dependent`."""

    head: int = Field(ge=0, description="Token index of the governor.")
    dependent: int = Field(ge=0, description="Token index of the dependent.")
    label: str = Field(description="Dependency relation (e.g. 'nsubj', 'amod', 'prep_of').")


class DependencyGraph(BaseModel, frozen=True):
    """Directed, edge-labeled graph over the token indices of one sentence.

    Read-only to the resolution core. Path queries use breadth-first search
    and visit neighbours in ascending token order, so ties between paths of
    equal length always break the same way.
    """

    edges: tuple[DependencyEdge, ...] = Field(default=(), description="All edges of the sentence.")

    def outgoing_edges(self, token: int) -> list[tuple[int, str]]:
        """Return (dependent, label) for every edge leaving `token`."""
        return [(e.dependent, e.label) for e in self.edges if e.head == token]

    def incoming_edges(self, token: int) -> list[tuple[int, str]]:
        """Return (head, label) for every edge entering `token`."""
        return [(e.head, e.label) for e in self.edges if e.dependent == token]

    def edges_between(self, a: int, b: int, ignore_direction: bool = False) -> list[str]:
        """Return the labels of edges from `a` to `b` (either way if `ignore_direction`)."""
        labels = [e.label for e in self.edges if e.head == a and e.dependent == b]
        if ignore_direction:
            labels.extend(e.label for e in self.edges if e.head == b and e.dependent == a)
        return labels

    def _neighbours(self, token: int, ignore_direction: bool) -> list[int]:
        found = {dep for dep, _ in self.outgoing_edges(token)}
        if ignore_direction:
            found.update(head for head, _ in self.incoming_edges(token))
        return sorted(found)

    def shortest_path(self, start: int, end: int, ignore_direction: bool = False) -> list[int]:
        """Return the token indices of a shortest path from `start` to `end`.

        Args:
            start: Token index to start from.
            end: Token index to reach.
            ignore_direction: Treat edges as undirected.

        Returns:
            The path including both endpoints, `[start]` when they coincide,
            or an empty list when `end` is unreachable.
        """
        if start == end:
            return [start]
        previous: dict[int, int] = {start: start}
        frontier: deque[int] = deque([start])
        while frontier:
            token = frontier.popleft()
            for neighbour in self._neighbours(token, ignore_direction):
                if neighbour in previous:
                    continue
                previous[neighbour] = token
                if neighbour == end:
                    path = [end]
                    while path[-1] != start:
                        path.append(previous[path[-1]])
                    path.reverse()
                    return path
                frontier.append(neighbour)
        return []


class Sentence(BaseModel, frozen=True):
    """One tokenized sentence with its (optional) annotations."""

    words: tuple[str, ...] = Field(description="Surface tokens.")
    lemmas: tuple[str, ...] | None = Field(default=None, description="Lemma per token, if tagged.")
    tags: tuple[str, ...] | None = Field(default=None, description="Part-of-speech tag per token, if tagged.")
    dependencies: DependencyGraph | None = Field(default=None, description="Dependency parse, if available.")

    @model_validator(mode="after")
    def annotations_align(self) -> "Sentence":
        if self.lemmas is not None and len(self.lemmas) != len(self.words):
            raise ValueError("lemmas must have one entry per word")
        if self.tags is not None and len(self.tags) != len(self.words):
            raise ValueError("tags must have one entry per word")
        return self

    def lemma(self, token: int) -> str:
        """Return the lemma at `token`, falling back to the lower-cased word."""
        if self.lemmas is not None:
            return self.lemmas[token]
        return self.words[token].lower()


class ParsedDocument(BaseModel, frozen=True):
    """A document that has already been split into parsed sentences."""

    document_id: str = Field(description="Unique identifier for this document.")
    sentences: tuple[Sentence, ...] = Field(default=(), description="Sentences in document order.")

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    @model_validator(mode="after")
    def _validate(self) -> "ParsedDocument":
        if not self.document_id.strip():
            raise ValueError("document_id must be non-empty")
        return self

    @contextmanager
    def modification_lock(self) -> Iterator[None]:
        """Hold the document's single-writer lock for modification-set updates."""
        with self._lock:
            yield
