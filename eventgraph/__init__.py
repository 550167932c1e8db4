"""
Event Graph - Biomedical Event Mention Resolution.

Normalizes the raw mentions produced by a biomedical grammar engine into a
canonical event set: polarity-corrected regulations and activations, pairwise
bindings, events split from their causes, and entity modifications (PTMs,
sites, mutations) attached where later stages expect them.

    from eventgraph import EventResolutionOrchestrator, load_config

    orchestrator = EventResolutionOrchestrator(config=load_config())
    result = orchestrator.resolve_document(document, raw_mentions)
"""

from eventgraph.config import ResolutionConfig, load_config
from eventgraph.context import ResolutionContext
from eventgraph.errors import (
    EventGraphError,
    MentionContractError,
    PolarityLabelError,
    UngroundedMentionError,
    UnknownLabelError,
)
from eventgraph.interfaces import MentionAnnotatorInterface
from eventgraph.normalize import convert_event_to_entity
from eventgraph.orchestrator import DocumentResolution, EventResolutionOrchestrator, ResolutionResult
from eventgraph.state import InMemoryMentionState
from eventgraph.taxonomy import DEFAULT_TAXONOMY, StaticTaxonomy

__all__ = [
    "DEFAULT_TAXONOMY",
    "DocumentResolution",
    "EventGraphError",
    "EventResolutionOrchestrator",
    "InMemoryMentionState",
    "MentionAnnotatorInterface",
    "MentionContractError",
    "PolarityLabelError",
    "ResolutionConfig",
    "ResolutionContext",
    "ResolutionResult",
    "StaticTaxonomy",
    "UngroundedMentionError",
    "UnknownLabelError",
    "convert_event_to_entity",
    "load_config",
]

__version__ = "0.1.0"
