"""Collapse of events into entity-equivalent mentions.

Downstream consumers often need an event as "the thing it produces": the
phosphorylation of RAS is RAS carrying a Phosphorylation PTM, a binding is a
Complex, and a regulation is whatever it regulates. `convert_event_to_entity`
walks nested ComplexEvents down to such a base case, carrying a negation flag
that is raised by any negative-polarity event on the way.
"""

from eventschema.mention import PTM, EventMention, Mention, RelationMention, TextBoundMention
from eventschema.taxonomy import TaxonomyInterface

from eventgraph.errors import MentionContractError
from eventgraph.polarity import has_negative_polarity
from eventgraph.ptm import get_modification_label


def _entity_with_ptm(event: EventMention, negated: bool) -> TextBoundMention:
    themes = event.arguments.get("theme", ())
    if not themes:
        raise MentionContractError(f"SimpleEvent {event.label} ({event.found_by}) has no theme")
    entity = themes[0]
    sites = event.arguments.get("site", ())
    ptm = PTM(
        kind=get_modification_label(event.label),
        evidence=event.trigger,
        site=sites[0] if sites else None,
        negated=negated,
    )
    return TextBoundMention(
        labels=entity.labels,
        sentence=entity.sentence,
        start=entity.start,
        end=entity.end,
        document=entity.document,
        found_by=entity.found_by,
        grounding=entity.grounding,
        modifications=set(entity.modifications) | {ptm},
    )


def convert_event_to_entity(
    mention: Mention,
    taxonomy: TaxonomyInterface,
    as_output: bool = True,
    negated: bool = False,
) -> Mention:
    """Convert an event to the entity it represents.

    - Entities and Generic_events are returned unchanged.
    - A Binding becomes a Complex relation with the same arguments.
    - A SimpleEvent becomes a new mention of its theme with the theme's
      modifications plus a PTM for the event (evidence is the trigger, site is
      the event's site argument, `negated` is the accumulated flag).
    - A ComplexEvent is replaced by its controlled (when `as_output`) or its
      controller, and sets the negation flag if its polarity is negative.

    The walk is a loop, so nesting depth does not consume stack. The input is
    never modified.

    Args:
        mention: The mention to convert.
        taxonomy: Supplies the Complex label chain.
        as_output: Follow controlled arguments (the event's output) rather than
            controllers.
        negated: Initial negation flag.

    Raises:
        MentionContractError: If a mention has a shape none of the cases
            above accepts.
    """
    current = mention
    while True:
        if current.matches("Entity") or current.matches("Generic_event"):
            return current
        if current.matches("Binding"):
            return RelationMention(
                labels=taxonomy.hypernyms_for("Complex"),
                sentence=current.sentence,
                start=current.start,
                end=current.end,
                document=current.document,
                found_by=current.found_by,
                arguments=dict(current.arguments),
            )
        if current.matches("SimpleEvent"):
            if not isinstance(current, EventMention):
                raise MentionContractError(f"SimpleEvent {current.label} ({current.found_by}) has no trigger")
            return _entity_with_ptm(current, negated)
        if current.matches("ComplexEvent"):
            role = "controlled" if as_output else "controller"
            arguments = current.arguments.get(role, ())
            if not arguments:
                raise MentionContractError(f"ComplexEvent {current.label} ({current.found_by}) has no {role}")
            if has_negative_polarity(current):
                negated = True
            current = arguments[0]
            continue
        raise MentionContractError(f"Cannot convert {current.label} ({current.found_by}) to an entity")
