"""Polarity resolution for regulations and activations.

A rule may match "X inhibits the increase of Y" with a Positive_ label because
the trigger is "increase". Counting the semantic negatives ("inhibit", "block",
"decrease", ...) on the dependency paths between the trigger and each argument
fixes this: an odd count flips the label to the opposite polarity.
"""

import logging
import re
from typing import Iterable

from eventschema.mention import BaseMention, EventMention, Mention

from eventgraph.config import ResolutionConfig
from eventgraph.errors import PolarityLabelError
from eventgraph.paths import expand_with_modifiers, shortest_token_path

logger = logging.getLogger(__name__)

SEMANTIC_NEGATIVE_PATTERN = re.compile(
    "attenu|block|deactiv|decreas|degrad|delet|diminish|disrupt|impair|imped|inhibit|knockdown|knockout"
    "|limit|loss|lower|negat|reduc|reliev|repress|restrict|revers|silenc|slow|starv|suppress|supress",
    re.IGNORECASE,
)

POSITIVE_PREFIX = "Positive_"
NEGATIVE_PREFIX = "Negative_"


def flip_label(label: str) -> str:
    """Return a polarized label with its polarity inverted.

    Raises:
        PolarityLabelError: If the label has neither a Positive_ nor a Negative_ prefix.
    """
    if label.startswith(POSITIVE_PREFIX):
        return NEGATIVE_PREFIX + label[len(POSITIVE_PREFIX) :]
    if label.startswith(NEGATIVE_PREFIX):
        return POSITIVE_PREFIX + label[len(NEGATIVE_PREFIX) :]
    raise PolarityLabelError(f"Must have a polarized label here, got {label!r}")


def has_negative_polarity(mention: BaseMention) -> bool:
    return mention.label.lower().startswith("negative")


def count_semantic_negatives(
    trigger: BaseMention,
    argument: BaseMention,
    excluded: Iterable[int],
    config: ResolutionConfig,
) -> int:
    """Count semantic negatives between a trigger and one argument.

    Args:
        trigger: The event trigger.
        argument: One argument of the event.
        excluded: Token indices never counted (the trigger's own tokens).
        config: Supplies the adjectival modifier edge pattern.

    Returns:
        The number of tokens on the shortest trigger-argument path, expanded
        with adjectival modifiers, whose lemma is a semantic negative. Zero
        when the two mentions are in different sentences or the sentence has
        no dependency parse.
    """
    path = shortest_token_path(trigger, argument)
    if not path:
        return 0
    sentence = trigger.sentence_obj
    deps = sentence.dependencies
    if deps is None:
        return 0
    skip = set(excluded)
    negatives = 0
    for token in expand_with_modifiers(path, deps, config.modifier_regex):
        if token in skip:
            continue
        if SEMANTIC_NEGATIVE_PATTERN.search(sentence.lemma(token)):
            negatives += 1
    return negatives


def switch_label(mention: Mention, config: ResolutionConfig) -> Mention:
    """Flip the polarity of a ComplexEvent negated an odd number of times.

    Only ComplexEvent-labeled event mentions are inspected; anything else is
    returned unchanged. The label is replaced on both the event and its
    trigger and every other field is carried over. The input mention is never
    modified.

    Raises:
        PolarityLabelError: If a flip is needed but the label is not polarized.
    """
    if not isinstance(mention, EventMention) or not mention.matches("ComplexEvent"):
        return mention
    trigger = mention.trigger
    excluded = set(trigger.tokens)
    total = sum(
        count_semantic_negatives(trigger, argument, excluded, config)
        for arguments in mention.arguments.values()
        for argument in arguments
    )
    if total % 2 == 0:
        return mention
    new_labels = (flip_label(mention.label),) + mention.labels[1:]
    logger.debug("Flipping %s to %s (%d semantic negatives)", mention.label, new_labels[0], total)
    new_trigger = trigger.derive(labels=new_labels)
    return mention.derive(labels=new_labels, trigger=new_trigger)
