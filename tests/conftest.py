"""Test fixtures and factory helpers for building documents and mentions.

This module provides:
- `make_sentence` / `make_document` for parsed documents with hand-written
  dependency edges
- `make_entity`, `make_event` and `make_relation` for mentions whose labels are
  expanded to the full hypernym chain of the default taxonomy
- `make_context` for a resolution context over an in-memory mention state
- Pytest fixtures for the default config and taxonomy

Dependency edges are written as (head, dependent, label) triples over token
indices, e.g. ``(1, 0, "nsubj")``.
"""

from typing import Iterable, Mapping, Sequence

import pytest

from eventschema.document import DependencyEdge, DependencyGraph, ParsedDocument, Sentence
from eventschema.mention import EventMention, Mention, Modification, RelationMention, TextBoundMention

from eventgraph.config import ResolutionConfig
from eventgraph.context import ResolutionContext
from eventgraph.state import InMemoryMentionState
from eventgraph.taxonomy import DEFAULT_TAXONOMY, StaticTaxonomy


def make_sentence(
    text: str,
    edges: Iterable[tuple[int, int, str]] | None = (),
    lemmas: Sequence[str] | None = None,
) -> Sentence:
    """Create a sentence from whitespace-separated words.

    Pass ``edges=None`` for a sentence without a dependency parse.
    """
    dependencies = None
    if edges is not None:
        dependencies = DependencyGraph(
            edges=tuple(DependencyEdge(head=head, dependent=dep, label=label) for head, dep, label in edges)
        )
    return Sentence(
        words=tuple(text.split()),
        lemmas=tuple(lemmas) if lemmas is not None else None,
        dependencies=dependencies,
    )


def make_document(*sentences: Sentence, document_id: str = "doc-1") -> ParsedDocument:
    return ParsedDocument(document_id=document_id, sentences=sentences)


def make_entity(
    document: ParsedDocument,
    start: int,
    end: int | None = None,
    label: str = "Gene_or_gene_product",
    grounding: str | None = None,
    sentence: int = 0,
    found_by: str = "ner",
    modifications: Iterable[Modification] = (),
) -> TextBoundMention:
    """Create a text-bound mention over [start, end) (a single token by default)."""
    return TextBoundMention(
        labels=DEFAULT_TAXONOMY.hypernyms_for(label),
        sentence=sentence,
        start=start,
        end=end if end is not None else start + 1,
        document=document,
        found_by=found_by,
        grounding=grounding,
        modifications=set(modifications),
    )


def _covering(sentence: int, spans: Iterable[Mention]) -> tuple[int, int]:
    same = [m for m in spans if m.sentence == sentence]
    return min(m.start for m in same), max(m.end for m in same)


def make_event(
    document: ParsedDocument,
    label: str,
    trigger: int | tuple[int, int],
    arguments: Mapping[str, Sequence[Mention]],
    sentence: int = 0,
    found_by: str = "test_rule",
    paths: Mapping | None = None,
    modifications: Iterable[Modification] = (),
) -> EventMention:
    """Create an event mention whose interval covers its trigger and same-sentence arguments."""
    start, end = (trigger, trigger + 1) if isinstance(trigger, int) else trigger
    labels = DEFAULT_TAXONOMY.hypernyms_for(label)
    trigger_mention = TextBoundMention(
        labels=labels,
        sentence=sentence,
        start=start,
        end=end,
        document=document,
        found_by=found_by,
    )
    args = {role: tuple(values) for role, values in arguments.items()}
    span_start, span_end = _covering(sentence, [trigger_mention, *(a for v in args.values() for a in v)])
    return EventMention(
        labels=labels,
        sentence=sentence,
        start=span_start,
        end=span_end,
        document=document,
        found_by=found_by,
        trigger=trigger_mention,
        arguments=args,
        paths=dict(paths or {}),
        modifications=set(modifications),
    )


def make_relation(
    document: ParsedDocument,
    label: str,
    arguments: Mapping[str, Sequence[Mention]],
    sentence: int = 0,
    found_by: str = "test_rule",
    grounding: str | None = None,
) -> RelationMention:
    """Create a relation mention whose interval covers its same-sentence arguments."""
    args = {role: tuple(values) for role, values in arguments.items()}
    start, end = _covering(sentence, [a for v in args.values() for a in v])
    return RelationMention(
        labels=DEFAULT_TAXONOMY.hypernyms_for(label),
        sentence=sentence,
        start=start,
        end=end,
        document=document,
        found_by=found_by,
        grounding=grounding,
        arguments=args,
    )


def make_context(
    document: ParsedDocument,
    mentions: Iterable[Mention] = (),
    config: ResolutionConfig | None = None,
) -> ResolutionContext:
    return ResolutionContext(
        document=document,
        taxonomy=DEFAULT_TAXONOMY,
        config=config or ResolutionConfig(),
        state=InMemoryMentionState(document, mentions),
    )


@pytest.fixture
def config() -> ResolutionConfig:
    """Default resolution config."""
    return ResolutionConfig()


@pytest.fixture
def taxonomy() -> StaticTaxonomy:
    """Default biomedical label hierarchy."""
    return DEFAULT_TAXONOMY


@pytest.fixture
def blocks_increase_document() -> ParsedDocument:
    """'MEK blocks increase of ERK': the path from 'increase' to MEK runs through 'blocks'."""
    return make_document(
        make_sentence(
            "MEK blocks increase of ERK",
            edges=[(1, 0, "nsubj"), (1, 2, "dobj"), (2, 4, "prep_of")],
            lemmas=["MEK", "block", "increase", "of", "ERK"],
        )
    )
