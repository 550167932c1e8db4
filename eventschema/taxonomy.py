"""Label hierarchy interface.

The grounding/knowledge-base collaborator owns the type hierarchy. The core only
needs to ask for the full hypernym chain of a label when it builds new mentions
(Regulation, Complex, Ubiquitination) and to test ancestry.
"""

from abc import ABC, abstractmethod


class TaxonomyInterface(ABC):
    """Abstract lookup from a concrete label to its ordered hypernym chain.

    Implementations should be immutable and thread-safe: the same taxonomy is
    shared by every document resolved in a batch.
    """

    @abstractmethod
    def hypernyms_for(self, label: str) -> tuple[str, ...]:
        """Return `label` followed by its ancestors, most specific first.

        Raises:
            UnknownLabelError: If the label is not part of the hierarchy.
        """

    @abstractmethod
    def labels(self) -> frozenset[str]:
        """Return every label known to the hierarchy."""

    def is_a(self, label: str, ancestor: str) -> bool:
        """Return True if `ancestor` appears in the hypernym chain of `label`."""
        return ancestor in self.hypernyms_for(label)
