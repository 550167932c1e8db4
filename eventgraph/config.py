"""Resolution settings loaded from TOML (e.g. eventgraph.toml).

Config file is looked up in order:
  1. Path in EVENTGRAPH_CONFIG env var (if set)
  2. eventgraph.toml in the current working directory

Only the `[resolution]` table is read. If no file is found, built-in defaults
are used. Example:

    [resolution]
    blocking_label = "Gene_or_gene_product"
    nary_bindings = false
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from functools import cached_property
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EVENTGRAPH_CONFIG"
CONFIG_FILE_NAME = "eventgraph.toml"


class ResolutionConfig(BaseModel, frozen=True):
    """Tunable labels and switches used by the resolution actions.

    Attributes:
        modifier_edge_pattern: Regex matched against dependency labels to find
            adjectival modifiers of path tokens.
        preposition_edge_prefix: Prefix of dependency labels treated as prepositions.
        blocking_label: Mentions with this label block a small-molecule argument
            when they sit on the trigger-to-argument path.
        small_molecule_label: Label of arguments subject to the blocking check.
        nary_bindings: Keep all binding participants in one event instead of
            splitting them into pairs.
    """

    modifier_edge_pattern: str = Field(
        default="amod",
        description="Regex for adjectival modifier dependency labels.",
    )
    preposition_edge_prefix: str = Field(
        default="prep",
        min_length=1,
        description="Prefix of prepositional dependency labels.",
    )
    blocking_label: str = Field(
        default="Gene_or_gene_product",
        min_length=1,
        description="Label of mentions that block small-molecule arguments.",
    )
    small_molecule_label: str = Field(
        default="Simple_chemical",
        min_length=1,
        description="Label of arguments checked for blocking mentions.",
    )
    nary_bindings: bool = Field(
        default=False,
        description="Merge binding participants instead of pairing them.",
    )

    @field_validator("modifier_edge_pattern")
    @classmethod
    def pattern_must_compile(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"modifier_edge_pattern is not a valid regex: {e}") from e
        return value

    @cached_property
    def modifier_regex(self) -> re.Pattern[str]:
        """The compiled modifier_edge_pattern, compiled once per config."""
        return re.compile(self.modifier_edge_pattern)


def _default_config_paths() -> list[Path]:
    """Return paths to check for eventgraph.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get(CONFIG_ENV_VAR):
        paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    paths.append(Path.cwd() / CONFIG_FILE_NAME)
    return paths


def load_config(path: Path | None = None) -> ResolutionConfig:
    """Load the resolution config from TOML.

    Args:
        path: Explicit config file. When omitted, the default lookup order is used.

    Returns:
        A validated ResolutionConfig. Defaults are used if no readable file is
        found or the file has no [resolution] table.

    Raises:
        pydantic.ValidationError: If the [resolution] table has invalid values.
    """
    candidates = [path] if path is not None else _default_config_paths()
    for candidate in candidates:
        if not candidate.is_file():
            continue
        try:
            with open(candidate, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring unreadable config file %s: %s", candidate, e)
            continue
        table = data.get("resolution")
        if isinstance(table, dict):
            return ResolutionConfig.model_validate(table)
        return ResolutionConfig()
    return ResolutionConfig()
