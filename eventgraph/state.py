"""In-memory mention state for one document.

Keeps the document's active mentions in insertion order with a per-sentence
index, so token coverage queries only scan the mentions of one sentence.

Thread safety: Not thread-safe. Each document gets its own state and the
pipeline stages of one document run strictly in sequence.
"""

from typing import Iterable, Sequence

from eventschema.document import ParsedDocument
from eventschema.mention import Mention
from eventschema.state import MentionStateInterface


class InMemoryMentionState(MentionStateInterface):
    """Mention state using a list plus a sentence-keyed index.

    Example:
        ```python
        state = InMemoryMentionState(document, raw_mentions)
        proteins = state.mentions_for(0, [3, 4], label="Gene_or_gene_product")
        ```
    """

    def __init__(self, document: ParsedDocument, mentions: Iterable[Mention] = ()) -> None:
        self._document = document
        self._mentions: list[Mention] = []
        self._seen: set[Mention] = set()
        self._by_sentence: dict[int, list[Mention]] = {}
        self.add_all(mentions)

    @property
    def document(self) -> ParsedDocument:
        return self._document

    def add(self, mention: Mention) -> None:
        """Adds a mention to the state.

        Args:
            mention: A mention of this state's document.

        Raises:
            ValueError: If the mention belongs to another document.
        """
        if mention.document.document_id != self._document.document_id:
            raise ValueError(
                f"Mention from document {mention.document.document_id!r} "
                f"added to state of {self._document.document_id!r}"
            )
        if mention in self._seen:
            return
        self._seen.add(mention)
        self._mentions.append(mention)
        self._by_sentence.setdefault(mention.sentence, []).append(mention)

    def mentions_for(
        self,
        sentence: int,
        tokens: Iterable[int],
        label: str | None = None,
    ) -> list[Mention]:
        wanted = set(tokens)
        results: list[Mention] = []
        for mention in self._by_sentence.get(sentence, []):
            if label is not None and not mention.matches(label):
                continue
            if any(token in wanted for token in mention.tokens):
                results.append(mention)
        return results

    def all_mentions(self) -> Sequence[Mention]:
        return tuple(self._mentions)

    def count(self) -> int:
        return len(self._mentions)
