"""Tests for the resolution orchestrator.

This module verifies:
- The full pipeline on a document with a site, a cause and an EventSite relation
- Activations suppressed by regulations built earlier in the same document
- Annotators running during cleanup
- Ubiquitination candidates of ubiquitin dropped before splitting
- Fatal errors failing only their own document, in single and batch resolution
"""

import logging

from eventschema.mention import EventMention, EventSite, Negation, PTM, RelationMention

from eventgraph.config import ResolutionConfig
from eventgraph.interfaces import MentionAnnotatorInterface
from eventgraph.orchestrator import EventResolutionOrchestrator

from tests.conftest import make_document, make_entity, make_event, make_relation, make_sentence


def _phosphorylation_document(document_id: str = "doc-1"):
    """'MEK phosphorylates ERK at Ser217' with an EventSite relation for ERK."""
    document = make_document(
        make_sentence(
            "MEK phosphorylates ERK at Ser217",
            edges=[(1, 0, "nsubj"), (1, 2, "dobj"), (2, 4, "prep_at")],
        ),
        document_id=document_id,
    )
    mek = make_entity(document, 0, grounding="uniprot:Q02750")
    erk = make_entity(document, 2, grounding="uniprot:P28482")
    ser = make_entity(document, 4, label="Site")
    event = make_event(document, "Phosphorylation", 1, {"theme": [erk], "cause": [mek]})
    event_site = make_relation(document, "EventSite", {"entity": [erk], "site": [ser]})
    return document, [mek, erk, ser, event, event_site]


def _failing_document(document_id: str = "doc-bad"):
    """A binding of ungrounded themes: a pipeline-ordering bug."""
    document = make_document(make_sentence("RAS binds RAF"), document_id=document_id)
    ras = make_entity(document, 0)
    raf = make_entity(document, 2)
    binding = make_event(document, "Binding", 1, {"theme1": [ras], "theme2": [raf]})
    return document, [ras, raf, binding]


class NegateEverything(MentionAnnotatorInterface):
    """Annotator that marks every event as negated."""

    def annotate(self, mentions, context):
        return [m.derive(modifications=m.modifications | {Negation()}) for m in mentions]


class TestResolveDocument:
    """Tests for single-document resolution."""

    def test_full_pipeline(self) -> None:
        """Site promotion, cause splitting and regulation building run in order."""
        document, mentions = _phosphorylation_document()
        mek, erk, ser, _, _ = mentions

        result = EventResolutionOrchestrator().resolve_document(document, mentions)

        assert result.errors == ()
        assert result.document_id == "doc-1"
        assert result.mentions_in == 5
        assert result.mentions_out == len(result.mentions) == 5
        events = [m for m in result.mentions if isinstance(m, EventMention)]
        regulations = [m for m in result.mentions if isinstance(m, RelationMention)]
        assert len(events) == 1
        assert events[0].arguments == {"theme": (erk,), "site": (ser,)}
        assert len(regulations) == 1
        assert regulations[0].label == "Positive_regulation"
        assert regulations[0].arguments["controller"] == (mek,)
        assert regulations[0].arguments["controlled"] == (events[0],)
        assert EventSite(site=ser) not in erk.modifications

    def test_regulation_collapses_to_modified_entity(self) -> None:
        """The resolved regulation's output is ERK phosphorylated at Ser217."""
        document, mentions = _phosphorylation_document()
        orchestrator = EventResolutionOrchestrator()
        result = orchestrator.resolve_document(document, mentions)
        (regulation,) = [m for m in result.mentions if isinstance(m, RelationMention)]

        entity = orchestrator.to_entity(regulation)

        assert entity.text == "ERK"
        (ptm,) = [mod for mod in entity.modifications if isinstance(mod, PTM)]
        assert ptm.kind == "Phosphorylation"
        assert ptm.site.text == "Ser217"
        assert not ptm.negated
        assert orchestrator.to_entity(regulation, as_output=False).text == "MEK"

    def test_activation_suppressed_by_regulation(self) -> None:
        """An activation of an already regulated span is not reported."""
        document = make_document(make_sentence("MEK activates ERK", edges=[(1, 0, "nsubj"), (1, 2, "dobj")]))
        mek = make_entity(document, 0, grounding="uniprot:Q02750")
        erk = make_entity(document, 2, grounding="uniprot:P28482")
        regulation = make_event(document, "Positive_regulation", 1, {"controller": [mek], "controlled": [erk]})
        activation = make_event(document, "Positive_activation", 1, {"controller": [mek], "controlled": [erk]})

        result = EventResolutionOrchestrator().resolve_document(document, [mek, erk, regulation, activation])

        labels = [m.label for m in result.mentions]
        assert labels.count("Positive_regulation") == 1
        assert "Positive_activation" not in labels

    def test_annotators_run_before_splitting(self) -> None:
        """Negations added by annotators move to the regulation created from the cause."""
        document, mentions = _phosphorylation_document()
        orchestrator = EventResolutionOrchestrator(annotators=(NegateEverything(),))

        result = orchestrator.resolve_document(document, mentions)

        (event,) = [m for m in result.mentions if isinstance(m, EventMention)]
        (regulation,) = [m for m in result.mentions if isinstance(m, RelationMention)]
        assert Negation() in regulation.modifications
        assert Negation() not in event.modifications

    def test_nary_bindings(self) -> None:
        """With nary_bindings, binding participants stay together."""
        document = make_document(make_sentence("RAS binds RAF and SOS"))
        themes = [make_entity(document, i) for i in (0, 2, 4)]
        binding = make_event(document, "Binding", 1, {"theme1": themes[:1], "theme2": themes[1:]})
        orchestrator = EventResolutionOrchestrator(config=ResolutionConfig(nary_bindings=True))

        result = orchestrator.resolve_document(document, [*themes, binding])

        (resolved,) = [m for m in result.mentions if m.matches("Binding")]
        assert resolved.arguments == {"theme": tuple(themes)}

    def test_ubiquitination_by_ubiquitin_dropped(self) -> None:
        """A raw ubiquitination caused by ubiquitin yields no event and no regulation."""
        document = make_document(make_sentence("ubiquitin ubiquitinates RAS"))
        ubiquitin = make_entity(document, 0, grounding="uniprot:P0CG48")
        ras = make_entity(document, 2, grounding="uniprot:P01112")
        event = make_event(document, "Ubiquitination", 1, {"theme": [ras], "cause": [ubiquitin]})

        result = EventResolutionOrchestrator().resolve_document(document, [ubiquitin, ras, event])

        assert result.errors == ()
        assert result.mentions == (ubiquitin, ras)

    def test_auto_event_keeps_other_causes(self) -> None:
        """Every cause of an auto event controls the split event."""
        document = make_document(make_sentence("RAS autophosphorylates with MEK"))
        ras = make_entity(document, 0, grounding="uniprot:P01112")
        mek = make_entity(document, 3, grounding="uniprot:Q02750")
        event = make_event(document, "Phosphorylation", 1, {"theme": [ras], "cause": [ras, mek]})

        result = EventResolutionOrchestrator().resolve_document(document, [ras, mek, event])

        regulations = [m for m in result.mentions if isinstance(m, RelationMention)]
        assert {r.arguments["controller"][0].text for r in regulations} == {"RAS", "MEK"}
        (split_event,) = [m for m in result.mentions if isinstance(m, EventMention)]
        assert split_event.arguments == {"theme": (ras,)}

    def test_debug_traces_not_reset(self, caplog) -> None:
        """Resolving a document keeps the orchestrator logger's configured level."""
        caplog.set_level(logging.DEBUG, logger="eventgraph.orchestrator")
        document, mentions = _phosphorylation_document()

        EventResolutionOrchestrator().resolve_document(document, mentions)

        assert "simple events after splitting" in caplog.text

    def test_fatal_error_fails_document(self) -> None:
        """Contract violations are reported on the document result."""
        document, mentions = _failing_document()

        result = EventResolutionOrchestrator().resolve_document(document, mentions)

        assert result.mentions_out == 0
        assert result.mentions == ()
        assert len(result.errors) == 1
        assert result.errors[0].startswith("UngroundedMentionError")


class TestResolveBatch:
    """Tests for concurrent batch resolution."""

    async def test_batch_isolates_failures(self) -> None:
        """One failing document does not affect the others."""
        good = _phosphorylation_document("doc-good")
        other = _phosphorylation_document("doc-other")
        bad = _failing_document("doc-bad")

        result = await EventResolutionOrchestrator().resolve_batch([good, bad, other])

        assert result.documents_processed == 3
        assert result.documents_failed == 1
        assert result.errors == ()
        assert [r.document_id for r in result.document_results] == ["doc-good", "doc-bad", "doc-other"]
        assert result.document_results[0].mentions_out == 5
        assert result.document_results[1].errors
        assert result.document_results[2].mentions_out == 5

    async def test_empty_batch(self) -> None:
        """An empty batch produces an empty result."""
        result = await EventResolutionOrchestrator().resolve_batch([])

        assert result.documents_processed == 0
        assert result.document_results == ()
