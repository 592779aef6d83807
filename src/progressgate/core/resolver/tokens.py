"""Prerequisite token grammar.

Every raw token is parsed once into a closed set of variants (``TokenKind``)
and the resolver dispatches on the variant. Parsing priority is fixed: the
first matching rule wins, so a token that is both a typed gate and an entity
id is treated as the typed gate.

    craft_<name>         -> CRAFTED(name)
    farm_stage_<N>       -> FARM_STAGE(N)
    hero_level_<N>       -> HERO_LEVEL(N)
    blueprint_<name>     -> BLUEPRINT(token)
    ...deed...           -> DEED(token)
    <stage name>         -> STAGE_NAME(token, plot threshold)
    <entity id>          -> ENTITY_REF(token)
    anything else        -> UNKNOWN(token)

A ``farm_stage_``/``hero_level_`` token whose suffix is not a plain integer
does not match its gate and falls through to the later rules.
"""

from __future__ import annotations

import re
from collections.abc import Container, Mapping
from dataclasses import dataclass
from enum import Enum

_FARM_STAGE = re.compile(r"^farm_stage_(\d+)$")
_HERO_LEVEL = re.compile(r"^hero_level_(\d+)$")


class TokenKind(Enum):
    """Closed set of prerequisite token variants."""

    CRAFTED = "crafted"
    FARM_STAGE = "farm_stage"
    HERO_LEVEL = "hero_level"
    BLUEPRINT = "blueprint"
    DEED = "deed"
    STAGE_NAME = "stage_name"
    ENTITY_REF = "entity_ref"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ParsedToken:
    """A parsed prerequisite token.

    Attributes:
        kind: The token variant.
        normalized: The normalised token text.
        value: Variant payload: the tool/weapon name for CRAFTED, otherwise
            the normalised token itself.
        threshold: Numeric requirement for FARM_STAGE, HERO_LEVEL and
            STAGE_NAME (plot count); None for the rest.
    """

    kind: TokenKind
    normalized: str
    value: str
    threshold: int | None = None

    @property
    def is_typed_gate(self) -> bool:
        """True for any variant other than ENTITY_REF and UNKNOWN."""
        return self.kind not in (TokenKind.ENTITY_REF, TokenKind.UNKNOWN)


def parse_token(
    normalized: str,
    known_ids: Container[str],
    stage_plot_thresholds: Mapping[str, int],
) -> ParsedToken:
    """Parse a normalised token into its variant.

    Args:
        normalized: Token already passed through ``normalize_id``.
        known_ids: Entity ids of the corpus, for ENTITY_REF.
        stage_plot_thresholds: Stage-name table, for STAGE_NAME.
    """
    if normalized.startswith("craft_"):
        return ParsedToken(TokenKind.CRAFTED, normalized, normalized[len("craft_"):])

    match = _FARM_STAGE.match(normalized)
    if match:
        return ParsedToken(TokenKind.FARM_STAGE, normalized, normalized, int(match.group(1)))

    match = _HERO_LEVEL.match(normalized)
    if match:
        return ParsedToken(TokenKind.HERO_LEVEL, normalized, normalized, int(match.group(1)))

    if normalized.startswith("blueprint_"):
        return ParsedToken(TokenKind.BLUEPRINT, normalized, normalized)

    if "deed" in normalized:
        return ParsedToken(TokenKind.DEED, normalized, normalized)

    plots = stage_plot_thresholds.get(normalized)
    if plots is not None:
        return ParsedToken(TokenKind.STAGE_NAME, normalized, normalized, plots)

    if normalized in known_ids:
        return ParsedToken(TokenKind.ENTITY_REF, normalized, normalized)

    return ParsedToken(TokenKind.UNKNOWN, normalized, normalized)
