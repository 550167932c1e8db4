"""
Event Schema - Base Models and Interfaces

This package contains only Pydantic models and ABC interfaces used by the
event resolution core. It defines:

- Parsed document, sentence and dependency graph models
- Mention variants (text-bound, event, relation) and modifications
- Taxonomy (label hierarchy) interface
- Mention state interface
"""

from eventschema.document import DependencyEdge, DependencyGraph, ParsedDocument, Sentence
from eventschema.mention import (
    PTM,
    BaseMention,
    EventMention,
    EventSite,
    Hypothesis,
    Mention,
    Modification,
    Mutant,
    Negation,
    RelationMention,
    SyntacticPath,
    TextBoundMention,
)
from eventschema.state import MentionStateInterface
from eventschema.taxonomy import TaxonomyInterface

__all__ = [
    "BaseMention",
    "DependencyEdge",
    "DependencyGraph",
    "EventMention",
    "EventSite",
    "Hypothesis",
    "Mention",
    "MentionStateInterface",
    "Modification",
    "Mutant",
    "Negation",
    "ParsedDocument",
    "PTM",
    "RelationMention",
    "Sentence",
    "SyntacticPath",
    "TaxonomyInterface",
    "TextBoundMention",
]

__version__ = "0.1.0"
