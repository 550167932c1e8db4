"""Entity-producing actions."""

import logging
from typing import Sequence

from eventschema.mention import Mention, RelationMention

from eventgraph.context import ResolutionContext

logger = logging.getLogger(__name__)


def unpack_relations(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Replace each relation by its argument mentions.

    Relations matched by a token pattern carry their entities as arguments;
    later rules need the entities themselves. Mentions that are not relations
    are dropped.
    """
    return [
        argument
        for mention in mentions
        if isinstance(mention, RelationMention)
        for arguments in mention.arguments.values()
        for argument in arguments
    ]


def mk_ner_mentions(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Keep NER mentions that no other mention in the state overlaps.

    Mentions from custom entity rules take precedence over the NER labels,
    so those rules must have added their mentions to the state first.
    """
    kept = []
    for mention in mentions:
        overlapping = [other for other in context.state.mentions_for(mention.sentence, mention.tokens) if other != mention]
        if overlapping:
            logger.debug("Dropping NER mention %r: overlaps %s", mention.text, overlapping[0].label)
            continue
        kept.append(mention)
    return kept
