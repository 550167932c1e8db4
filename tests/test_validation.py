"""Tests for small-molecule argument validation."""

from eventgraph.config import ResolutionConfig
from eventgraph.validation import consecutive_preps, keep_if_valid_args, protein_between, valid_arguments

from tests.conftest import make_context, make_document, make_entity, make_event, make_relation, make_sentence


def _binding_document(first_label: str, second_label: str):
    """'RAS binds SOS GTP' with the path binds -> SOS -> GTP."""
    return make_document(
        make_sentence(
            "RAS binds SOS GTP",
            edges=[(1, 0, "nsubj"), (1, 2, first_label), (2, 3, second_label)],
        )
    )


class TestConsecutivePreps:
    """Tests for the prepositional attachment exemption."""

    def test_node_between_two_preps(self) -> None:
        """A node entered and left by prepositional edges is exempt."""
        document = _binding_document("prep_to", "prep_of")
        deps = document.sentences[0].dependencies

        assert consecutive_preps([1, 2, 3], deps, 1)

    def test_only_one_prep(self) -> None:
        """One prepositional edge is not enough."""
        document = _binding_document("dobj", "prep_of")
        deps = document.sentences[0].dependencies

        assert not consecutive_preps([1, 2, 3], deps, 1)

    def test_path_endpoints_never_exempt(self) -> None:
        """The first and last path nodes have only one edge on the path."""
        document = _binding_document("prep_to", "prep_of")
        deps = document.sentences[0].dependencies

        assert not consecutive_preps([1, 2, 3], deps, 0)
        assert not consecutive_preps([1, 2, 3], deps, 2)


class TestProteinBetween:
    """Tests for blocking proteins on trigger-argument paths."""

    def test_protein_on_path_blocks(self) -> None:
        """A protein between trigger and chemical blocks it."""
        document = _binding_document("dobj", "nn")
        sos = make_entity(document, 2)
        context = make_context(document, [sos])
        trigger = make_entity(document, 1, label="Binding")
        gtp = make_entity(document, 3, label="Simple_chemical")

        assert protein_between(trigger, gtp, context)

    def test_consecutive_preps_exempt(self) -> None:
        """A protein between two prepositional edges does not block."""
        document = _binding_document("prep_to", "prep_of")
        context = make_context(document, [make_entity(document, 2)])
        trigger = make_entity(document, 1, label="Binding")
        gtp = make_entity(document, 3, label="Simple_chemical")

        assert not protein_between(trigger, gtp, context)

    def test_no_protein_in_state(self) -> None:
        """Tokens not covered by a blocking mention never block."""
        document = _binding_document("dobj", "nn")
        context = make_context(document, [make_entity(document, 2, label="Family")])
        trigger = make_entity(document, 1, label="Binding")

        assert not protein_between(trigger, make_entity(document, 3, label="Simple_chemical"), context)

    def test_blocking_label_is_configurable(self) -> None:
        """The blocking label comes from the config."""
        document = _binding_document("dobj", "nn")
        config = ResolutionConfig(blocking_label="Family")
        context = make_context(document, [make_entity(document, 2, label="Family")], config=config)
        trigger = make_entity(document, 1, label="Binding")

        assert protein_between(trigger, make_entity(document, 3, label="Simple_chemical"), context)

    def test_cross_sentence_never_blocks(self) -> None:
        """Arguments in another sentence are never blocked."""
        document = make_document(make_sentence("RAS binds SOS", edges=[(1, 2, "dobj")]), make_sentence("GTP"))
        context = make_context(document, [make_entity(document, 2)])
        trigger = make_entity(document, 1, label="Binding")

        assert not protein_between(trigger, make_entity(document, 0, label="Simple_chemical", sentence=1), context)

    def test_missing_parse_never_blocks(self) -> None:
        """Sentences without dependencies never block."""
        document = make_document(make_sentence("RAS binds SOS GTP", edges=None))
        context = make_context(document, [make_entity(document, 2)])
        trigger = make_entity(document, 1, label="Binding")

        assert not protein_between(trigger, make_entity(document, 3, label="Simple_chemical"), context)


class TestValidArguments:
    """Tests for valid_arguments and keep_if_valid_args."""

    def test_blocked_chemical_invalidates_event(self) -> None:
        """An event with a blocked small-molecule argument is invalid and filtered out."""
        document = _binding_document("dobj", "nn")
        sos = make_entity(document, 2)
        context = make_context(document, [sos])
        gtp = make_entity(document, 3, label="Simple_chemical")
        ras = make_entity(document, 0)
        blocked = make_event(document, "Binding", 1, {"theme": [ras, gtp]})
        fine = make_event(document, "Binding", 1, {"theme": [ras, sos]})

        assert not valid_arguments(blocked, context)
        assert keep_if_valid_args([blocked, fine], context) == [fine]

    def test_textbound_and_relations_always_valid(self) -> None:
        """Mentions without a trigger are never inspected."""
        document = _binding_document("dobj", "nn")
        context = make_context(document, [make_entity(document, 2)])
        gtp = make_entity(document, 3, label="Simple_chemical")
        relation = make_relation(document, "Binding", {"theme": [make_entity(document, 0), gtp]})

        assert valid_arguments(gtp, context)
        assert valid_arguments(relation, context)
