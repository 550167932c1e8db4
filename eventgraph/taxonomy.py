"""Enumerated label hierarchy for biomedical mentions.

The hierarchy is written out once as a nested mapping and flattened at import
time into a table from each label to its ordered ancestor chain, so label
checks throughout the pipeline are plain membership tests on `Mention.labels`
rather than string probing.

Also provides the output typing helpers used by downstream formatters:
`event_type()`, `argument_type()` and `prettify_label()`.
"""

from types import MappingProxyType
from typing import Mapping

from eventschema.mention import BaseMention
from eventschema.taxonomy import TaxonomyInterface

from eventgraph.errors import UnknownLabelError

ADDITIVE_MODIFICATIONS = (
    "Acetylation",
    "Farnesylation",
    "Glycosylation",
    "Hydrolysis",
    "Hydroxylation",
    "Methylation",
    "Phosphorylation",
    "Ribosylation",
    "Sumoylation",
    "Ubiquitination",
)

REMOVAL_MODIFICATIONS = (
    "Deacetylation",
    "Defarnesylation",
    "Deglycosylation",
    "Dehydrolysis",
    "Dehydroxylation",
    "Demethylation",
    "Dephosphorylation",
    "Deribosylation",
    "Desumoylation",
    "Deubiquitination",
)

MODIFICATION_EVENTS = frozenset(ADDITIVE_MODIFICATIONS + REMOVAL_MODIFICATIONS)
REGULATION_EVENTS = frozenset({"Positive_regulation", "Negative_regulation"})
ACTIVATION_EVENTS = frozenset({"Positive_activation", "Negative_activation"})

BIO_HIERARCHY: Mapping[str, Mapping] = {
    "Entity": {
        "BioEntity": {
            "BioChemicalEntity": {
                "MacroMolecule": {
                    "Complex": {},
                    "Gene_or_gene_product": {},
                    "Family": {},
                },
                "Simple_chemical": {},
            },
            "BioProcess": {},
        },
        "Generic_entity": {},
    },
    "Site": {},
    "Cellular_component": {},
    "Event": {
        "SimpleEvent": {
            "AdditiveEvent": {label: {} for label in ADDITIVE_MODIFICATIONS},
            "RemovalEvent": {label: {} for label in REMOVAL_MODIFICATIONS},
            "Binding": {},
            "Transcription": {},
            "Translocation": {},
        },
        "Generic_event": {},
        "ComplexEvent": {
            "Regulation": {"Positive_regulation": {}, "Negative_regulation": {}},
            "Activation": {"Positive_activation": {}, "Negative_activation": {}},
        },
    },
    "PTM": {},
    "EventSite": {},
    "Mutant": {},
}


def _flatten(tree: Mapping[str, Mapping], ancestors: tuple[str, ...], out: dict[str, tuple[str, ...]]) -> None:
    for label, children in tree.items():
        if label in out:
            raise ValueError(f"Label {label!r} appears more than once in the hierarchy")
        chain = (label,) + ancestors
        out[label] = chain
        _flatten(children, chain, out)


class StaticTaxonomy(TaxonomyInterface):
    """Taxonomy backed by an enumerated label tree.

    The chains are computed once in the constructor and never change, so one
    instance can be shared freely between threads.

    Example:
        ```python
        taxonomy = StaticTaxonomy({"Event": {"ComplexEvent": {"Regulation": {}}}})
        taxonomy.hypernyms_for("Regulation")  # ("Regulation", "ComplexEvent", "Event")
        ```
    """

    def __init__(self, tree: Mapping[str, Mapping] = BIO_HIERARCHY):
        chains: dict[str, tuple[str, ...]] = {}
        _flatten(tree, (), chains)
        self._chains = MappingProxyType(chains)

    def hypernyms_for(self, label: str) -> tuple[str, ...]:
        try:
            return self._chains[label]
        except KeyError as e:
            raise UnknownLabelError(f"Unknown label {label!r}") from e

    def labels(self) -> frozenset[str]:
        return frozenset(self._chains)


DEFAULT_TAXONOMY = StaticTaxonomy()


def prettify_label(label: str) -> str:
    """Canonicalize a label for output: lower case, dashes for underscores."""
    return label.lower().replace("_", "-")


def event_type(label: str) -> str:
    """Return the output event type for an event label.

    Raises:
        UnknownLabelError: If the label is not an event label with an output type.
    """
    if label in MODIFICATION_EVENTS:
        return "protein-modification"
    if label in ("Binding", "Complex"):
        return "complex-assembly"
    if label == "Transcription":
        return "transcription"
    if label == "Translocation":
        return "translocation"
    if label in REGULATION_EVENTS:
        return "regulation"
    if label in ACTIVATION_EVENTS:
        return "activation"
    raise UnknownLabelError(f"Unknown event type: {label!r}")


def argument_type(argument: BaseMention) -> str:
    """Return the output type of an event argument: complex, entity or event."""
    if argument.matches("Complex"):
        return "complex"
    if argument.matches("Entity") or argument.matches("Site") or argument.matches("Cellular_component"):
        return "entity"
    if argument.matches("Event"):
        return "event"
    raise UnknownLabelError(f"Unknown argument type: {argument.labels!r}")
