from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from eventschema.document import ParsedDocument
from eventschema.state import MentionStateInterface
from eventschema.taxonomy import TaxonomyInterface

from eventgraph.config import ResolutionConfig


class ResolutionContext(BaseModel):
    """Everything an action needs besides the mentions it transforms."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    document: ParsedDocument
    taxonomy: TaxonomyInterface
    config: ResolutionConfig
    state: MentionStateInterface

    @model_validator(mode="after")
    def document_is_consistent(self) -> "ResolutionContext":
        if self.document is not self.state.document:
            raise ValueError("State document does not match this context")
        return self

    def hypernyms_for(self, label: str) -> tuple[str, ...]:
        return self.taxonomy.hypernyms_for(label)
