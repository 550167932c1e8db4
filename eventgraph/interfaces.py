"""Pluggable mention annotators.

Annotators run during the cleanup stage, after invalid arguments have been
filtered and before events are split. They typically attach Negation or
Hypothesis modifications to events.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from eventschema.mention import Mention

from eventgraph.context import ResolutionContext


class MentionAnnotatorInterface(ABC):
    """Adds annotations to the mentions of one document.

    Implementations may return new mentions (built with `derive()`) or attach
    modifications in place. In-place writes must be made while holding
    `context.document.modification_lock()`.

    Example:
        ```python
        class NotNegator(MentionAnnotatorInterface):
            def annotate(self, mentions, context):
                return [
                    m.derive(modifications=m.modifications | {Negation()})
                    if "not" in m.sentence_obj.words[: m.start] else m
                    for m in mentions
                ]
        ```
    """

    @abstractmethod
    def annotate(self, mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
        """Return the annotated mentions.

        Args:
            mentions: The mentions that survived argument validation.
            context: Resolution context of the document.

        Returns:
            The mentions to pass on to event splitting.
        """
