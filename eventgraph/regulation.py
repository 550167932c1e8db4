"""Regulation and activation construction.

Candidates matched by the rule engine as Positive_/Negative_ regulations or
activations are checked for role legality, polarity-corrected, stripped of
placeholder arguments and required to relate two distinct entities before they
are emitted.
"""

import logging
from typing import Sequence

from eventschema.mention import BaseMention, EventMention, Mention

from eventgraph.context import ResolutionContext
from eventgraph.errors import UngroundedMentionError
from eventgraph.polarity import switch_label

logger = logging.getLogger(__name__)


def bioprocess_valid(mention: BaseMention) -> bool:
    """Return False when exactly one of controller and controlled is a BioProcess.

    Only head labels are compared. Neither side being a BioProcess, or both
    being BioProcesses, is legal.
    """
    controller = [arg.label for arg in mention.arguments.get("controller", ())]
    controlled = [arg.label for arg in mention.arguments.get("controlled", ())]
    return ("BioProcess" in controller) == ("BioProcess" in controlled)


def has_distinct_controller_controlled(mention: BaseMention) -> bool:
    """Return True if controller and controlled share no grounding identifier.

    Ungrounded arguments contribute nothing, so a missing or ungrounded side is
    trivially distinct.
    """
    controlled = {arg.grounding for arg in mention.arguments.get("controlled", ()) if arg.grounding is not None}
    controller = {arg.grounding for arg in mention.arguments.get("controller", ()) if arg.grounding is not None}
    return controlled.isdisjoint(controller)


def same_entity_id(first: BaseMention, second: BaseMention) -> bool:
    """Return True if both mentions are grounded to the same identifier.

    Raises:
        UngroundedMentionError: If either mention has not been grounded.
    """
    for mention in (first, second):
        if not mention.is_grounded:
            raise UngroundedMentionError(f"Mention {mention.text!r} ({mention.label}) must be grounded")
    return first.grounding == second.grounding


def remove_dummy(mention: Mention) -> Mention:
    if isinstance(mention, EventMention) and "dummy" in mention.arguments:
        return mention.without("dummy")
    return mention


def has_controller(mention: BaseMention) -> bool:
    return bool(mention.arguments.get("controller"))


def has_syn_path_overlap(mention: Mention) -> bool:
    """Return True if the first controller and controlled share their first path edge.

    Mentions without syntactic paths never overlap.
    """
    paths = getattr(mention, "paths", None)
    if not paths:
        return False
    controlled = mention.arguments.get("controlled", ())
    controller = mention.arguments.get("controller", ())
    if not controlled or not controller:
        return False
    controlled_path = mention.get_path("controlled", controlled[0])
    controller_path = mention.get_path("controller", controller[0])
    if controlled_path and controller_path:
        return controlled_path[0] == controller_path[0]
    return False


def _has_event_controller(mention: BaseMention) -> bool:
    controller = mention.arguments.get("controller", ())
    return bool(controller) and controller[0].matches("Event")


def prefer_event_controllers(mentions: Sequence[Mention]) -> list[Mention]:
    """Drop entity-controlled readings of a span that also has an event-controlled reading.

    Mentions are grouped by (sentence, start, end). Within a group that has at
    least one candidate whose first controller is an Event, only those
    candidates are kept. Order is preserved.
    """
    preferred: set[tuple[int, int, int]] = set()
    for mention in mentions:
        if _has_event_controller(mention):
            preferred.add((mention.sentence, mention.start, mention.end))
    return [
        mention
        for mention in mentions
        if (mention.sentence, mention.start, mention.end) not in preferred or _has_event_controller(mention)
    ]


def _has_complex_roles(mention: BaseMention) -> bool:
    return bool(mention.arguments.get("controller")) and bool(mention.arguments.get("controlled"))


def mk_regulation(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Build regulations from rule-engine candidates.

    Args:
        mentions: Candidate regulation mentions.
        context: Resolution context; supplies the config used for polarity.

    Returns:
        The surviving regulations, polarity-corrected and without "dummy"
        arguments.

    Raises:
        PolarityLabelError: If a candidate needing a flip has an unpolarized label.
    """
    regulations = []
    for mention in mentions:
        if not _has_complex_roles(mention):
            logger.debug("Dropping regulation %s: missing controller or controlled", mention.found_by)
            continue
        if not bioprocess_valid(mention):
            logger.debug("Dropping regulation %s: bioprocess controls a biochemical entity", mention.found_by)
            continue
        regulation = remove_dummy(switch_label(mention, context.config))
        if not has_distinct_controller_controlled(regulation):
            logger.debug("Dropping regulation %s: controller and controlled are the same entity", mention.found_by)
            continue
        regulations.append(regulation)
    return regulations


def mk_activation(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Build activations from rule-engine candidates.

    Runs the regulation checks and additionally prefers event controllers,
    rejects overlapping controller/controlled attachments, and drops any
    activation whose controlled span is already covered by a Regulation in the
    mention state. Regulations must therefore be built and added to the state
    before this action runs.
    """
    activations = []
    for mention in prefer_event_controllers(mentions):
        if not bioprocess_valid(mention):
            logger.debug("Dropping activation %s: bioprocess controls a biochemical entity", mention.found_by)
            continue
        if has_syn_path_overlap(mention):
            logger.debug("Dropping activation %s: controller and controlled share a path", mention.found_by)
            continue
        activation = remove_dummy(switch_label(mention, context.config))
        controlled = activation.arguments.get("controlled", ())
        if not controlled:
            logger.debug("Dropping activation %s: no controlled", mention.found_by)
            continue
        regulations = [
            reg
            for arg in controlled
            for reg in context.state.mentions_for(activation.sentence, arg.tokens, "Regulation")
        ]
        if regulations:
            logger.debug("Dropping activation %s: overlaps %d regulation(s)", mention.found_by, len(regulations))
            continue
        if not has_controller(activation):
            logger.debug("Dropping activation %s: no controller", mention.found_by)
            continue
        if not has_distinct_controller_controlled(activation):
            logger.debug("Dropping activation %s: controller and controlled are the same entity", mention.found_by)
            continue
        activations.append(activation)
    return activations
