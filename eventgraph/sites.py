"""Attachment and promotion of entity modifications.

The rule engine reports PTMs, event sites and mutations as relation mentions
("PTM", "EventSite", "Mutant") whose arguments are entities already in the
mention state. The `store_*` actions attach the corresponding modification to
those entities in place and emit no mentions of their own; they always return
an empty list. Later stages see the attached modifications only because they
run after these writes commit, so the orchestrator runs the store actions
first.

Writes are collected as `ModificationProposal`s and applied in one pass while
holding the document's modification lock. Upstream must pass the same entity
instances in relation arguments and in the mention state, otherwise the writes
land on a copy nobody reads.

`site_sniffer` later promotes EventSite modifications found on the arguments of
a SimpleEvent to a "site" argument of the event itself.
"""

import logging
from typing import Iterable, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field

from eventschema.document import ParsedDocument
from eventschema.mention import EventMention, EventSite, Mention, Modification, Mutant, PTM, RelationMention

from eventgraph.context import ResolutionContext
from eventgraph.ptm import UNKNOWN, get_modification_label

logger = logging.getLogger(__name__)


class ModificationProposal(BaseModel):
    """A pending write to one mention's modification set."""

    model_config = ConfigDict(frozen=True)

    target: Mention = Field(description="Mention whose modification set is changed.")
    modification: Modification = Field(description="Modification to add or remove.")
    action: Literal["add", "remove"] = Field(default="add", description="Whether to add or remove the modification.")


def apply_proposals(proposals: Iterable[ModificationProposal], document: ParsedDocument) -> int:
    """Apply proposals in order under the document's modification lock.

    Returns:
        The number of proposals applied.
    """
    applied = 0
    with document.modification_lock():
        for proposal in proposals:
            if proposal.action == "add":
                proposal.target.modifications.add(proposal.modification)
            else:
                proposal.target.modifications.discard(proposal.modification)
            applied += 1
    return applied


def _relations(mentions: Sequence[Mention], label: str) -> Iterable[RelationMention]:
    for mention in mentions:
        if isinstance(mention, RelationMention) and mention.matches(label):
            yield mention


def store_ptm(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Attach a PTM to the "entity" of every PTM relation.

    The kind is read from the first "mod" argument. Relations whose text does
    not name a known modification attach nothing.
    """
    proposals = []
    for relation in _relations(mentions, "PTM"):
        entities = relation.arguments.get("entity", ())
        mods = relation.arguments.get("mod", ())
        if not entities or not mods:
            logger.debug("Skipping PTM relation %s: missing entity or mod", relation.found_by)
            continue
        evidence = mods[0]
        kind = get_modification_label(evidence.text)
        if kind == UNKNOWN:
            logger.debug("Skipping PTM relation %s: unknown modification %r", relation.found_by, evidence.text)
            continue
        sites = relation.arguments.get("site", ())
        ptm = PTM(kind=kind, evidence=evidence, site=sites[0] if sites else None)
        proposals.append(ModificationProposal(target=entities[0], modification=ptm))
    apply_proposals(proposals, context.document)
    return []


def store_event_site(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Attach every "site" of each EventSite relation to every one of its entities."""
    proposals = []
    for relation in _relations(mentions, "EventSite"):
        entities = relation.arguments.get("entity", ())
        sites = relation.arguments.get("site", ())
        if not entities or not sites:
            logger.debug("Skipping EventSite relation %s: missing entity or site", relation.found_by)
            continue
        for entity in entities:
            for site in sites:
                proposals.append(ModificationProposal(target=entity, modification=EventSite(site=site)))
    apply_proposals(proposals, context.document)
    return []


def store_mutants(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Attach a Mutant for every "mutant" of each Mutant relation to its entity."""
    proposals = []
    for relation in _relations(mentions, "Mutant"):
        entities = relation.arguments.get("entity", ())
        mutants = relation.arguments.get("mutant", ())
        if not entities or not mutants:
            logger.debug("Skipping Mutant relation %s: missing entity or mutant", relation.found_by)
            continue
        for mutant in mutants:
            modification = Mutant(evidence=mutant, found_by=relation.found_by)
            proposals.append(ModificationProposal(target=entities[0], modification=modification))
    apply_proposals(proposals, context.document)
    return []


def site_sniffer(mentions: Sequence[Mention], context: ResolutionContext) -> list[Mention]:
    """Promote EventSite modifications of SimpleEvent arguments to "site" arguments.

    The EventSite modifications are removed from the arguments as they are
    consumed. Together with any explicit "site" argument, each distinct site
    yields its own copy of the event with that single site. Every site is thus
    attributed to the event whichever argument it came from; this is a known
    approximation kept for compatibility.

    Mentions that are not SimpleEvents, or have no sites, pass through.
    """
    results: list[Mention] = []
    for mention in mentions:
        if not (isinstance(mention, EventMention) and mention.matches("SimpleEvent")):
            results.append(mention)
            continue
        proposals = []
        sites: list[Mention] = []
        with context.document.modification_lock():
            for arguments in mention.arguments.values():
                for argument in arguments:
                    for modification in list(argument.modifications):
                        if isinstance(modification, EventSite):
                            proposals.append(
                                ModificationProposal(target=argument, modification=modification, action="remove")
                            )
                            sites.append(modification.site)
            apply_proposals(proposals, context.document)
        sites.extend(mention.arguments.get("site", ()))
        if not sites:
            results.append(mention)
            continue
        for site in dict.fromkeys(sites):
            results.append(mention.derive(arguments={**mention.arguments, "site": (site,)}))
    return results
