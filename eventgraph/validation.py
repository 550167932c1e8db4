"""Argument validation for small-molecule event arguments.

A small molecule is a poor argument when a protein sits between it and the
trigger in the dependency graph: "A inhibits B binding to GTP" should not yield
an event of A with GTP. Prepositional-attachment ambiguity makes the parse
unreliable where two prepositional edges meet on the same token, so those
tokens never block.
"""

import logging
from typing import Sequence

from eventschema.document import DependencyGraph
from eventschema.mention import BaseMention, EventMention, Mention

from eventgraph.context import ResolutionContext

logger = logging.getLogger(__name__)


def consecutive_preps(path: Sequence[int], deps: DependencyGraph, position: int, prefix: str = "prep") -> bool:
    """Return True if the edges entering and leaving `path[position]` are both prepositional."""
    if position <= 0 or position >= len(path) - 1:
        return False
    before = deps.edges_between(path[position - 1], path[position], ignore_direction=True)
    after = deps.edges_between(path[position], path[position + 1], ignore_direction=True)
    return any(label.startswith(prefix) for label in before) and any(label.startswith(prefix) for label in after)


def protein_between(trigger: BaseMention, argument: BaseMention, context: ResolutionContext) -> bool:
    """Return True if a blocking mention lies on a trigger-to-argument path.

    Every (trigger token, argument token) pair is checked. A path token blocks
    when a mention with the configured blocking label covers it, unless the
    token sits between two prepositional edges of that path.
    """
    if trigger.sentence != argument.sentence:
        return False
    deps = trigger.sentence_obj.dependencies
    if deps is None:
        return False
    config = context.config
    for tok1 in trigger.tokens:
        for tok2 in argument.tokens:
            path = deps.shortest_path(tok1, tok2, ignore_direction=True)
            for position, node in enumerate(path):
                if not context.state.mentions_for(trigger.sentence, [node], config.blocking_label):
                    continue
                if not consecutive_preps(path, deps, position, config.preposition_edge_prefix):
                    return True
    return False


def valid_arguments(mention: Mention, context: ResolutionContext) -> bool:
    """Return False if an event has a small-molecule argument blocked by a protein.

    Text-bound and relation mentions have no trigger to inspect and always pass.
    """
    if not isinstance(mention, EventMention):
        return True
    label = context.config.small_molecule_label
    for arguments in mention.arguments.values():
        for argument in arguments:
            if argument.matches(label) and protein_between(mention.trigger, argument, context):
                return False
    return True


def keep_if_valid_args(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    kept = []
    for mention in mentions:
        if valid_arguments(mention, context):
            kept.append(mention)
        else:
            logger.debug("Dropping %s (found by %s): blocked small-molecule argument", mention.label, mention.found_by)
    return kept
