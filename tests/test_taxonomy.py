"""Tests for the label hierarchy and output typing helpers."""

import pytest

from eventgraph.errors import UnknownLabelError
from eventgraph.taxonomy import (
    ADDITIVE_MODIFICATIONS,
    REMOVAL_MODIFICATIONS,
    StaticTaxonomy,
    argument_type,
    event_type,
    prettify_label,
)

from tests.conftest import make_document, make_entity, make_event, make_sentence


class TestStaticTaxonomy:
    """Tests for hypernym chains."""

    def test_chain_is_most_specific_first(self, taxonomy) -> None:
        """hypernyms_for lists the label and then its ancestors."""
        assert taxonomy.hypernyms_for("Positive_regulation") == (
            "Positive_regulation",
            "Regulation",
            "ComplexEvent",
            "Event",
        )

    def test_modifications_are_simple_events(self, taxonomy) -> None:
        """Every modification label sits under SimpleEvent."""
        for label in ADDITIVE_MODIFICATIONS + REMOVAL_MODIFICATIONS:
            assert taxonomy.is_a(label, "SimpleEvent")

    def test_is_a(self, taxonomy) -> None:
        """is_a follows the ancestor chain."""
        assert taxonomy.is_a("Complex", "Entity")
        assert not taxonomy.is_a("BioProcess", "MacroMolecule")

    def test_unknown_label(self, taxonomy) -> None:
        """Unknown labels raise UnknownLabelError."""
        with pytest.raises(UnknownLabelError):
            taxonomy.hypernyms_for("Teleportation")

    def test_custom_tree(self) -> None:
        """A taxonomy can be built from any nested mapping."""
        taxonomy = StaticTaxonomy({"Thing": {"Widget": {}}})

        assert taxonomy.hypernyms_for("Widget") == ("Widget", "Thing")
        assert taxonomy.labels() == frozenset({"Thing", "Widget"})

    def test_duplicate_label_rejected(self) -> None:
        """A label may appear only once in the tree."""
        with pytest.raises(ValueError):
            StaticTaxonomy({"A": {"B": {}}, "C": {"B": {}}})


class TestOutputTypes:
    """Tests for event_type, argument_type and prettify_label."""

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Phosphorylation", "protein-modification"),
            ("Deubiquitination", "protein-modification"),
            ("Binding", "complex-assembly"),
            ("Transcription", "transcription"),
            ("Translocation", "translocation"),
            ("Negative_regulation", "regulation"),
            ("Positive_activation", "activation"),
        ],
    )
    def test_event_type(self, label, expected) -> None:
        """Event labels map to their output type."""
        assert event_type(label) == expected

    def test_event_type_unknown(self) -> None:
        """Labels without an output type raise."""
        with pytest.raises(UnknownLabelError):
            event_type("Gene_or_gene_product")

    def test_argument_type(self) -> None:
        """Arguments are typed as complex, entity or event."""
        document = make_document(make_sentence("MEK phosphorylates ERK"))
        erk = make_entity(document, 2)

        assert argument_type(make_entity(document, 0, label="Complex")) == "complex"
        assert argument_type(erk) == "entity"
        assert argument_type(make_event(document, "Phosphorylation", 1, {"theme": [erk]})) == "event"

    def test_prettify_label(self) -> None:
        """Labels are lower-cased with dashes."""
        assert prettify_label("Gene_or_gene_product") == "gene-or-gene-product"
