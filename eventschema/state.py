"""Mention state interface.

The active mention set of one document. Actions query it to find mentions
covering given tokens (e.g. a protein sitting on a dependency path, or a
Regulation already built over an Activation's controlled span).
"""

from abc import ABC, abstractmethod
from typing import Iterable, Sequence

from eventschema.document import ParsedDocument
from eventschema.mention import Mention


class MentionStateInterface(ABC):
    """Abstract interface for the mentions known for one document.

    Implementations are single-document and are not expected to be shared
    across threads.
    """

    @property
    @abstractmethod
    def document(self) -> ParsedDocument:
        """The document whose mentions this state holds."""

    @abstractmethod
    def add(self, mention: Mention) -> None:
        """Add a mention. Adding an equal mention twice keeps a single copy."""

    def add_all(self, mentions: Iterable[Mention]) -> None:
        """Add every mention in `mentions`."""
        for mention in mentions:
            self.add(mention)

    @abstractmethod
    def mentions_for(
        self,
        sentence: int,
        tokens: Iterable[int],
        label: str | None = None,
    ) -> list[Mention]:
        """Return mentions of `sentence` covering any of `tokens`.

        Args:
            sentence: Sentence index.
            tokens: Token indices; a mention qualifies if it covers at least one.
            label: If given, only mentions matching this label are returned.

        Returns:
            Matching mentions in insertion order, without duplicates.
        """

    @abstractmethod
    def all_mentions(self) -> Sequence[Mention]:
        """Return every mention in insertion order."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of mentions held."""
