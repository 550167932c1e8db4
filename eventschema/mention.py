"""Mention and modification models for the event resolution core.

A *mention* is a typed span extracted from one sentence. Mentions form a closed
union of three variants:

- **TextBoundMention**: A token interval; a grounded or ungrounded entity or site.
- **EventMention**: A trigger span plus named arguments (theme, cause,
  controller, controlled, site, ...), with optional per-argument syntactic paths.
- **RelationMention**: Named arguments without a trigger; used for relations
  created by the core (Regulation, Complex) and by the rule engine (PTM,
  EventSite, Mutant).

A *modification* records state attached to a mention: a post-translational
modification, a site waiting to be promoted to an event, a mutation, a negation
or a hypothesis.

**Ownership rules:**

Mentions are frozen. Changing the structure of a mention (labels, arguments,
trigger) always produces a new mention via `derive()`. The modification set is
the one mutable part of a mention; it is updated in place by the modification
stages and must only be written while holding the owning document's
`modification_lock()`.

Mention equality and hashing are structural and ignore the modification set, so
mentions can live inside modifications (PTM evidence, EventSite site) and inside
sets without their identity drifting as modifications are attached.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from eventschema.document import DependencyEdge, ParsedDocument, Sentence

SyntacticPath = tuple[DependencyEdge, ...]


class BaseMention(BaseModel):
    """Fields and behaviour shared by every mention variant.

    Key fields:
        - `labels`: Type names, most specific first (the full hypernym chain)
        - `sentence`: Index of the sentence in `document`
        - `start`/`end`: Token interval, end exclusive
        - `found_by`: Name of the rule (or core action) that produced the mention
        - `grounding`: Canonical identifier assigned by the grounding step
        - `modifications`: Mutable set of attached modifications
    """

    model_config = ConfigDict(frozen=True)

    labels: tuple[str, ...] = Field(min_length=1, description="Type labels, most specific first.")
    sentence: int = Field(ge=0, description="Sentence index within the document.")
    start: int = Field(ge=0, description="First token of the mention.")
    end: int = Field(ge=0, description="Token after the last token of the mention.")
    document: ParsedDocument = Field(repr=False, description="Owning document.")
    found_by: str = Field(description="Rule or action that produced this mention.")
    grounding: str | None = Field(default=None, description="Canonical identifier, if grounded.")
    modifications: set[Modification] = Field(
        default_factory=set,
        repr=False,
        description="Attached modifications; mutated in place under the document lock.",
    )

    @model_validator(mode="after")
    def _validate_interval(self) -> "BaseMention":
        if self.end <= self.start:
            raise ValueError("mention interval must be non-empty (end > start)")
        if self.sentence >= len(self.document.sentences):
            raise ValueError(f"sentence {self.sentence} out of range for document {self.document.document_id!r}")
        if self.end > len(self.document.sentences[self.sentence].words):
            raise ValueError("mention interval out of range for its sentence")
        return self

    @property
    def label(self) -> str:
        """The most specific label."""
        return self.labels[0]

    @property
    def tokens(self) -> range:
        return range(self.start, self.end)

    @property
    def sentence_obj(self) -> Sentence:
        return self.document.sentences[self.sentence]

    @property
    def text(self) -> str:
        return " ".join(self.sentence_obj.words[self.start : self.end])

    @property
    def is_grounded(self) -> bool:
        return self.grounding is not None

    def matches(self, label: str) -> bool:
        """Return True if `label` is this mention's label or one of its hypernyms."""
        return label in self.labels

    def overlaps(self, other: "BaseMention") -> bool:
        """Return True if both mentions share at least one token of the same sentence."""
        return (
            self.document.document_id == other.document.document_id
            and self.sentence == other.sentence
            and self.start < other.end
            and other.start < self.end
        )

    def derive(self, **update: Any) -> Any:
        """Return a new mention of the same variant with `update` applied.

        The new mention receives its own copy of the modification set unless
        `modifications` is part of the update.
        """
        data = {name: getattr(self, name) for name in type(self).model_fields if name != "modifications"}
        data.update(update)
        if "modifications" not in update:
            data["modifications"] = set(self.modifications)
        return type(self)(**data)

    def _structure(self) -> tuple:
        return ()

    def _identity(self) -> tuple:
        return (
            type(self).__name__,
            self.labels,
            self.document.document_id,
            self.sentence,
            self.start,
            self.end,
            self.found_by,
            self._structure(),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseMention):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


def _arguments_identity(arguments: Mapping[str, tuple[Any, ...]]) -> tuple:
    return tuple(
        (role, tuple(arg._identity() for arg in args))
        for role, args in sorted(arguments.items(), key=lambda item: item[0])
    )


class TextBoundMention(BaseMention):
    """A token span: an entity, site, or trigger."""

    mention_type: Literal["textbound"] = "textbound"

    @property
    def arguments(self) -> Mapping[str, tuple[Mention, ...]]:
        """Text-bound mentions never have arguments."""
        return {}


class EventMention(BaseMention):
    """An event with a trigger span and named arguments.

    `paths` holds, per role, the syntactic path from the trigger to each
    argument, keyed by the argument's token interval. Paths are only present
    for mentions matched through dependency patterns.
    """

    mention_type: Literal["event"] = "event"
    trigger: TextBoundMention = Field(description="Span naming the event.")
    arguments: dict[str, tuple[Mention, ...]] = Field(default_factory=dict)
    paths: dict[str, dict[tuple[int, int], SyntacticPath]] = Field(default_factory=dict, repr=False)

    def get_path(self, role: str, argument: BaseMention) -> SyntacticPath:
        """Return the trigger-to-argument path for `argument` in `role`, or ()."""
        return self.paths.get(role, {}).get((argument.start, argument.end), ())

    def without(self, *roles: str) -> "EventMention":
        """Return a new event with the given argument roles removed."""
        arguments = {role: args for role, args in self.arguments.items() if role not in roles}
        return self.derive(arguments=arguments)

    def _structure(self) -> tuple:
        return (self.trigger._identity(), _arguments_identity(self.arguments))


class RelationMention(BaseMention):
    """Named arguments without a trigger (Regulation, Complex, PTM, ...)."""

    mention_type: Literal["relation"] = "relation"
    arguments: dict[str, tuple[Mention, ...]] = Field(default_factory=dict)
    paths: dict[str, dict[tuple[int, int], SyntacticPath]] = Field(default_factory=dict, repr=False)

    def get_path(self, role: str, argument: BaseMention) -> SyntacticPath:
        """Return the path for `argument` in `role`, or ()."""
        return self.paths.get(role, {}).get((argument.start, argument.end), ())

    def without(self, *roles: str) -> "RelationMention":
        """Return a new relation with the given argument roles removed."""
        arguments = {role: args for role, args in self.arguments.items() if role not in roles}
        return self.derive(arguments=arguments)

    def _structure(self) -> tuple:
        return (_arguments_identity(self.arguments),)


Mention = Union[TextBoundMention, EventMention, RelationMention]


class PTM(BaseModel, frozen=True):
    """A post-translational modification of an entity (e.g. Phosphorylation)."""

    modification_type: Literal["ptm"] = "ptm"
    kind: str = Field(description="Modification label, e.g. 'Phosphorylation'.")
    evidence: Mention | None = Field(default=None, description="Span the modification was read from.")
    site: Mention | None = Field(default=None, description="Modified site, if known.")
    negated: bool = Field(default=False, description="True when the modification is asserted not to happen.")


class EventSite(BaseModel, frozen=True):
    """A site attached to an entity, waiting to be promoted to an event argument."""

    modification_type: Literal["event_site"] = "event_site"
    site: Mention


class Mutant(BaseModel, frozen=True):
    """A mutation of an entity."""

    modification_type: Literal["mutant"] = "mutant"
    evidence: Mention
    found_by: str


class Negation(BaseModel, frozen=True):
    """The mention is negated in text."""

    modification_type: Literal["negation"] = "negation"
    evidence: Mention | None = None


class Hypothesis(BaseModel, frozen=True):
    """The mention is stated as a hypothesis rather than a finding."""

    modification_type: Literal["hypothesis"] = "hypothesis"
    evidence: Mention | None = None


Modification = Union[PTM, EventSite, Mutant, Negation, Hypothesis]


for _model in (PTM, EventSite, Mutant, Negation, Hypothesis, BaseMention, TextBoundMention, EventMention, RelationMention):
    _model.model_rebuild()
