"""Resolution orchestrator for the event graph core.

This module provides the `EventResolutionOrchestrator` class, which runs the
raw mentions of one document through the fixed resolution pipeline:

    1. Attach PTM, EventSite and Mutant modifications to entities (in place)
    2. Drop events with a small-molecule argument blocked by a protein
    3. Promote event sites and run the configured annotators
    4. Drop ubiquitinations of ubiquitin, then split auto events, simple events
       with causes, and bindings
    5. Build regulations, add them to the mention state, then build activations

Stages of one document run strictly in sequence. Independent documents can be
resolved concurrently with `resolve_batch`, which runs each document in a
worker thread; a fatal error fails only its own document.

Example usage:
    ```python
    orchestrator = EventResolutionOrchestrator(config=load_config())
    result = orchestrator.resolve_document(document, raw_mentions)
    for mention in result.mentions:
        print(mention.label, mention.text)

    batch = await orchestrator.resolve_batch([(doc1, mentions1), (doc2, mentions2)])
    ```
"""

import asyncio
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from eventschema.document import ParsedDocument
from eventschema.mention import EventMention, Mention, TextBoundMention
from eventschema.taxonomy import TaxonomyInterface

from eventgraph.config import ResolutionConfig
from eventgraph.context import ResolutionContext
from eventgraph.errors import EventGraphError
from eventgraph.interfaces import MentionAnnotatorInterface
from eventgraph.logging import setup_logging
from eventgraph.normalize import convert_event_to_entity
from eventgraph.regulation import mk_activation, mk_regulation
from eventgraph.sites import site_sniffer, store_event_site, store_mutants, store_ptm
from eventgraph.splitting import (
    handle_auto_event,
    is_auto_event,
    mk_binding,
    mk_nary_binding,
    mk_ubiquitination,
    split_simple_events,
)
from eventgraph.state import InMemoryMentionState
from eventgraph.taxonomy import DEFAULT_TAXONOMY
from eventgraph.validation import keep_if_valid_args

MODIFICATION_RELATIONS = ("PTM", "EventSite", "Mutant")

logger = setup_logging()


class DocumentResolution(BaseModel):
    """Result of resolving the mentions of a single document.

    Immutable (frozen) so results can be shared between threads.

    Attributes:
        document_id: Identifier of the resolved document.
        mentions_in: Number of raw mentions received.
        mentions_out: Number of mentions in the final set.
        mentions: The final, canonical mention set.
        errors: Messages of fatal errors; a non-empty tuple means the document failed.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    mentions_in: int
    mentions_out: int
    mentions: tuple[Mention, ...] = Field(default=(), repr=False)
    errors: tuple[str, ...] = ()


class ResolutionResult(BaseModel):
    """Result of resolving a batch of documents.

    Attributes:
        documents_processed: Total number of documents in the batch.
        documents_failed: Number of documents that ended with errors.
        document_results: Per-document results, in input order.
        errors: Errors that prevented a document from producing any result.
    """

    model_config = ConfigDict(frozen=True)

    documents_processed: int
    documents_failed: int
    document_results: tuple[DocumentResolution, ...] = ()
    errors: tuple[str, ...] = ()


def _filter_ubiquitinations(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    kept = set(mk_ubiquitination([m for m in mentions if m.matches("Ubiquitination")], context))
    return [m for m in mentions if not m.matches("Ubiquitination") or m in kept]


def _needs_pairing(mention: Mention) -> bool:
    return (
        isinstance(mention, EventMention)
        and mention.matches("Binding")
        and ("theme1" in mention.arguments or "theme2" in mention.arguments)
    )


class EventResolutionOrchestrator(BaseModel):
    """Runs raw rule-engine mentions through the resolution pipeline.

    Attributes:
        taxonomy: Label hierarchy used for derived mentions.
        config: Resolution settings.
        annotators: Negation/hypothesis detectors run during cleanup, in order.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    taxonomy: TaxonomyInterface = DEFAULT_TAXONOMY
    config: ResolutionConfig = Field(default_factory=ResolutionConfig)
    annotators: tuple[MentionAnnotatorInterface, ...] = ()

    def _split(self, events: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
        events = _filter_ubiquitinations(events, context)
        auto = [m for m in events if isinstance(m, EventMention) and m.matches("SimpleEvent") and is_auto_event(m)]
        bindings = [m for m in events if _needs_pairing(m)]
        rest = [m for m in events if m not in auto and m not in bindings]

        split = handle_auto_event(auto, context) + split_simple_events(rest, context)
        if self.config.nary_bindings:
            split += mk_nary_binding(bindings, context)
        else:
            split += mk_binding(bindings, context)

        # bindings with a ubiquitin partner become Ubiquitinations here
        return _filter_ubiquitinations(split, context)

    def resolve_document(self, document: ParsedDocument, mentions: Sequence[Mention]) -> DocumentResolution:
        """Resolve the raw mentions of one document.

        The mentions' modification sets are updated in place by the attachment
        and site promotion stages; everything else produces new mentions.

        Args:
            document: The parsed document the mentions belong to.
            mentions: Raw mentions from the rule engine.

        Returns:
            A `DocumentResolution` with the final mentions, or with the error
            message if a fatal contract violation aborted the document.
        """
        try:
            final = self._resolve(document, mentions)
        except EventGraphError as e:
            logger.error(f"Resolution of document {document.document_id} failed: {e}", pprint=False)
            return DocumentResolution(
                document_id=document.document_id,
                mentions_in=len(mentions),
                mentions_out=0,
                errors=(f"{type(e).__name__}: {e}",),
            )
        return DocumentResolution(
            document_id=document.document_id,
            mentions_in=len(mentions),
            mentions_out=len(final),
            mentions=tuple(final),
        )

    def _resolve(self, document: ParsedDocument, mentions: Sequence[Mention]) -> list[Mention]:
        relations = [m for m in mentions if any(m.matches(label) for label in MODIFICATION_RELATIONS)]
        entities = [m for m in mentions if isinstance(m, TextBoundMention) and m not in relations]
        events = [m for m in mentions if m not in relations and m not in entities]
        simple = [m for m in events if not m.matches("ComplexEvent")]
        regulations = [m for m in events if m.matches("Regulation")]
        activations = [m for m in events if m.matches("Activation")]

        state = InMemoryMentionState(document, entities + simple)
        context = ResolutionContext(document=document, taxonomy=self.taxonomy, config=self.config, state=state)

        store_ptm(relations, context)
        store_event_site(relations, context)
        store_mutants(relations, context)

        simple = keep_if_valid_args(simple, context)
        simple = site_sniffer(simple, context)
        for annotator in self.annotators:
            simple = annotator.annotate(simple, context)
        simple = self._split(simple, context)
        logger.debug(f"{document.document_id}: {len(simple)} simple events after splitting", pprint=False)

        split_regulations = [m for m in simple if m.matches("Regulation")]
        simple = [m for m in simple if not m.matches("Regulation")]
        state.add_all(simple)

        regulations = mk_regulation(keep_if_valid_args(regulations, context) + split_regulations, context)
        state.add_all(regulations)
        activations = mk_activation(keep_if_valid_args(activations, context), context)
        state.add_all(activations)

        logger.info(
            f"{document.document_id}: {len(mentions)} raw mentions -> {len(entities)} entities, "
            f"{len(simple)} simple events, {len(regulations)} regulations, {len(activations)} activations",
            pprint=False,
        )
        return entities + simple + regulations + activations

    async def resolve_batch(
        self,
        documents: Sequence[tuple[ParsedDocument, Sequence[Mention]]],
    ) -> ResolutionResult:
        """Resolve several documents concurrently.

        Each document is resolved in a worker thread. Documents share no
        mention state, so a failure in one never affects the others.

        Args:
            documents: Pairs of (parsed document, raw mentions).

        Returns:
            A `ResolutionResult` with one `DocumentResolution` per document
            that produced a result, in input order.
        """
        outcomes = await asyncio.gather(
            *(asyncio.to_thread(self.resolve_document, document, mentions) for document, mentions in documents),
            return_exceptions=True,
        )
        results: list[DocumentResolution] = []
        errors: list[str] = []
        documents_failed = 0
        for (document, _), outcome in zip(documents, outcomes):
            if isinstance(outcome, BaseException):
                errors.append(f"Resolution of document {document.document_id} failed: {outcome}")
                documents_failed += 1
                continue
            results.append(outcome)
            if outcome.errors:
                documents_failed += 1

        return ResolutionResult(
            documents_processed=len(documents),
            documents_failed=documents_failed,
            document_results=tuple(results),
            errors=tuple(errors),
        )

    def to_entity(self, mention: Mention, as_output: bool = True) -> Mention:
        """Return the entity-equivalent view of a resolved mention."""
        return convert_event_to_entity(mention, self.taxonomy, as_output=as_output)
