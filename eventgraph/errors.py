"""Fatal error conditions of the resolution core.

Recoverable conditions (unknown modification text, missing arguments,
cross-sentence paths, sentences without a parse) never raise: the affected
mention is simply not emitted. The exceptions below signal contract violations
in upstream output or a pipeline-ordering bug and abort the current document.
"""


class EventGraphError(ValueError):
    """Base class for fatal resolution errors."""


class PolarityLabelError(EventGraphError):
    """A polarity flip was attempted on a label without a Positive_/Negative_ prefix."""


class UngroundedMentionError(EventGraphError):
    """A grounding comparison was made on a mention that has not been grounded."""


class MentionContractError(EventGraphError):
    """A mention does not have the shape its labels promise."""


class UnknownLabelError(EventGraphError):
    """A label is not part of the taxonomy."""
