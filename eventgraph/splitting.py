"""Decomposition of raw event matches into canonical events.

Rules often match one event that carries several participants or a cause. The
actions here turn such a match into the canonical shapes used downstream:

- **Auto events** ("autophosphorylation of X"): a theme-only event plus a
  Positive_regulation whose controller is the cause.
- **Simple events with causes**: one theme-only event per theme plus one
  Positive_regulation per (event, cause).
- **Bindings**: one Binding per pair of participants, collapsed to a
  Ubiquitination when one participant is ubiquitin.

Negation modifications of a split event always move to the regulation; every
other modification stays on the simple event.
"""

import itertools
import logging
from typing import Iterable, Sequence

from eventschema.mention import EventMention, Mention, Modification, Negation, RelationMention

from eventgraph.context import ResolutionContext
from eventgraph.regulation import same_entity_id

logger = logging.getLogger(__name__)

UBIQUITIN = "ubiquitin"


def _partition_negations(mention: Mention) -> tuple[set[Modification], set[Modification]]:
    negations = {mod for mod in mention.modifications if isinstance(mod, Negation)}
    others = {mod for mod in mention.modifications if not isinstance(mod, Negation)}
    return negations, others


def _regulation(
    source: Mention,
    controller: Mention,
    controlled: Mention,
    context: ResolutionContext,
    modifications: set[Modification],
) -> RelationMention:
    return RelationMention(
        labels=context.hypernyms_for("Positive_regulation"),
        sentence=source.sentence,
        start=source.start,
        end=source.end,
        document=source.document,
        found_by=source.found_by,
        arguments={"controller": (controller,), "controlled": (controlled,)},
        modifications=set(modifications),
    )


def _is_ubiquitin(mention: Mention) -> bool:
    return mention.text.lower() == UBIQUITIN


def is_auto_event(mention: Mention) -> bool:
    """Return True if some cause of the mention is grounded to the same identifier as a theme."""
    return any(
        cause.grounding is not None and cause.grounding == theme.grounding
        for cause in mention.arguments.get("cause", ())
        for theme in mention.arguments.get("theme", ())
    )


def handle_auto_event(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Split auto events into theme-only events and regulations by their causes.

    An auto event is an event mention in which some cause is its own theme
    ("autophosphorylation of X"). Every (cause, theme) pair of such an event is
    emitted: one theme-only event per theme and one regulation per (cause,
    event). Other inputs produce nothing.
    """
    results: list[Mention] = []
    for mention in mentions:
        if not isinstance(mention, EventMention) or not is_auto_event(mention):
            logger.debug("Skipping %s (found by %s): not an auto event", mention.label, mention.found_by)
            continue
        causes = mention.arguments["cause"]
        negations, others = _partition_negations(mention)
        rest = {role: args for role, args in mention.arguments.items() if role not in ("cause", "theme")}
        paths = {role: path for role, path in mention.paths.items() if role != "cause"}
        for theme in mention.arguments["theme"]:
            event = mention.derive(arguments={**rest, "theme": (theme,)}, paths=paths, modifications=set(others))
            results.extend(_regulation(mention, cause, event, context, negations) for cause in causes)
            results.append(event)
    return results


def split_simple_events(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Split SimpleEvents with a cause into theme-only events and regulations.

    A cause that is also one of the event's other arguments never becomes a
    controller. Mentions that are not SimpleEvents with a cause pass through.
    """
    results: list[Mention] = []
    for mention in mentions:
        if not (isinstance(mention, EventMention) and mention.matches("SimpleEvent") and "cause" in mention.arguments):
            results.append(mention)
            continue
        causes = mention.arguments["cause"]
        themes = mention.arguments.get("theme", ())
        negations, others = _partition_negations(mention)
        controlled_args = {arg for role, args in mention.arguments.items() if role != "cause" for arg in args}
        rest = {role: args for role, args in mention.arguments.items() if role not in ("cause", "theme")}
        paths = {role: path for role, path in mention.paths.items() if role != "cause"}

        events = [
            mention.derive(arguments={**rest, "theme": (theme,)}, paths=paths, modifications=set(others))
            for theme in themes
        ]
        regulations = [
            _regulation(mention, cause, event, context, negations)
            for event in events
            for cause in causes
            if cause not in controlled_args
        ]
        results.extend(events)
        results.extend(regulations)
    return results


def mk_bindings_from_pairs(
    pairs: Iterable[tuple[Mention, Mention]],
    original: EventMention,
    context: ResolutionContext,
) -> list[Mention]:
    """Build one Binding per pair of distinct participants.

    A pair with ubiquitin as either member becomes a Ubiquitination of the
    other member.

    Raises:
        UngroundedMentionError: If a participant has not been grounded.
    """
    bindings: list[Mention] = []
    for theme1, theme2 in pairs:
        if same_entity_id(theme1, theme2):
            logger.debug("Dropping binding %s: both themes are %s", original.found_by, theme1.grounding)
            continue
        if _is_ubiquitin(theme1):
            bindings.append(
                original.derive(labels=context.hypernyms_for("Ubiquitination"), arguments={"theme": (theme2,)})
            )
        elif _is_ubiquitin(theme2):
            bindings.append(
                original.derive(labels=context.hypernyms_for("Ubiquitination"), arguments={"theme": (theme1,)})
            )
        else:
            bindings.append(original.derive(arguments={"theme": (theme1, theme2)}))
    return bindings


def mk_binding(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Decompose Binding matches into pairwise Binding events.

    Participants come in two roles, "theme1" (subject position) and "theme2"
    (object position):

    - One side with two or more members and the other empty: every unordered
      pair of that side.
    - One side with a single Generic_entity and the other empty: one Binding
      with that theme.
    - Otherwise: the cross product of the two sides.

    Bindings that end up with fewer than two participants are dropped. Non-
    Binding mentions pass through unchanged.
    """
    results: list[Mention] = []
    for mention in mentions:
        if not (isinstance(mention, EventMention) and mention.matches("Binding")):
            results.append(mention)
            continue
        theme1s = mention.arguments.get("theme1", ())
        theme2s = mention.arguments.get("theme2", ())

        if len(theme1s) > 1 and not theme2s:
            results.extend(mk_bindings_from_pairs(itertools.combinations(theme1s, 2), mention, context))
        elif len(theme2s) > 1 and not theme1s:
            results.extend(mk_bindings_from_pairs(itertools.combinations(theme2s, 2), mention, context))
        elif not theme2s and any(theme.matches("Generic_entity") for theme in theme1s):
            results.append(_generic_binding(mention, theme1s))
        elif not theme1s and any(theme.matches("Generic_entity") for theme in theme2s):
            results.append(_generic_binding(mention, theme2s))
        else:
            pairs = list(itertools.product(theme1s, theme2s))
            if not pairs:
                logger.debug("Dropping binding %s: fewer than two participants", mention.found_by)
            results.extend(mk_bindings_from_pairs(pairs, mention, context))
    return results


def _generic_binding(mention: EventMention, themes: tuple[Mention, ...]) -> EventMention:
    arguments = {role: args for role, args in mention.arguments.items() if role not in ("theme1", "theme2")}
    arguments["theme"] = themes
    return mention.derive(arguments=arguments)


def mk_nary_binding(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Merge both participant roles of each Binding into one "theme" list."""
    results: list[Mention] = []
    for mention in mentions:
        if isinstance(mention, EventMention) and mention.matches("Binding"):
            themes = mention.arguments.get("theme1", ()) + mention.arguments.get("theme2", ())
            results.append(mention.derive(arguments={"theme": themes}))
        else:
            results.append(mention)
    return results


def mk_ubiquitination(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Drop Ubiquitination candidates whose theme or cause is ubiquitin itself."""
    kept = []
    for mention in mentions:
        themes = mention.arguments.get("theme", ())
        causes = mention.arguments.get("cause", ())
        if any(_is_ubiquitin(arg) for arg in themes) or any(_is_ubiquitin(arg) for arg in causes):
            logger.debug("Dropping ubiquitination %s: ubiquitin cannot be ubiquitinated", mention.found_by)
            continue
        kept.append(mention)
    return kept
