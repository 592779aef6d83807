"""Corpus data types: Entity, Corpus, and id normalisation helpers.

An ``Entity`` is an immutable catalog record (action, item, building,
blueprint) carrying an id and its raw prerequisite tokens. A ``Corpus`` is the
ordered, read-only collection the graph, the resolver and the corpus validator
are built from. Neither is ever mutated by the core.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_INVALID_ID_CHARS = re.compile(r"[^a-z0-9_-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def normalize_id(raw: str | None) -> str:
    """Normalise an entity id or prerequisite token for consistent lookup.

    Lower-cases, turns whitespace runs into ``_``, drops characters outside
    ``[a-z0-9_-]``, collapses repeated underscores and trims leading and
    trailing underscores. ``None`` and non-strings normalise to ``""``.

    >>> normalize_id("  Homestead Deed ")
    'homestead_deed'
    """
    if not raw or not isinstance(raw, str):
        return ""
    value = _WHITESPACE.sub("_", raw.lower().strip())
    value = _INVALID_ID_CHARS.sub("", value)
    value = _REPEATED_UNDERSCORES.sub("_", value)
    return value.strip("_")


def split_prerequisites(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Split a prerequisite field into normalised tokens.

    Accepts a ``;``-separated string or an iterable of tokens. Blank tokens
    are dropped; order is preserved.
    """
    if value is None:
        return ()
    parts = value.split(";") if isinstance(value, str) else list(value)
    tokens = (normalize_id(str(p)) for p in parts)
    return tuple(t for t in tokens if t)


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(v.strip() for v in value.split(";") if v.strip())
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class Entity:
    """An immutable corpus record.

    Only ``id`` and ``raw_prerequisites`` take part in graph construction and
    prerequisite resolution. The remaining fields are catalog metadata read
    by the corpus validator's consistency checks.

    The id, prerequisite tokens, tool and materials are normalised on
    construction, so the graph, the resolver and the corpus validator all see
    the same tokens however the entity was built.

    Attributes:
        id: Unique entity id.
        raw_prerequisites: Ordered prerequisite tokens. Empty = no prerequisites.
        name: Display name used in resolver reasons; defaults to ``id``.
        kind: Catalog type (e.g. ``clean_up``, ``blueprint``, ``adventure``).
        categories: Category tags, used to infer an implied farm stage.
        tool_required: Tool the action needs, if any.
        materials_gain: Materials this entity produces.
        gold_cost: Gold price of the first tier.
    """

    id: str
    raw_prerequisites: tuple[str, ...] = ()
    name: str = ""
    kind: str = ""
    categories: tuple[str, ...] = ()
    tool_required: str | None = None
    materials_gain: tuple[str, ...] = ()
    gold_cost: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", normalize_id(self.id))
        object.__setattr__(self, "raw_prerequisites", split_prerequisites(self.raw_prerequisites))
        object.__setattr__(self, "tool_required", normalize_id(self.tool_required) or None)
        object.__setattr__(
            self, "materials_gain", tuple(m for m in map(normalize_id, self.materials_gain) if m)
        )

    @property
    def display_name(self) -> str:
        """Return the display name, falling back to the id."""
        return self.name or self.id

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> Entity:
        """Build an entity from a corpus-feed record.

        ``prerequisites`` may be a list or a ``;``-joined string.

        Raises:
            ValueError: If the record has no usable id or a bad gold cost.
        """
        entity_id = normalize_id(record.get("id"))
        if not entity_id:
            raise ValueError(f"Entity record has no usable id: {dict(record)!r}")
        return cls(
            id=entity_id,
            raw_prerequisites=record.get("prerequisites") or (),
            name=str(record.get("name") or ""),
            kind=str(record.get("type") or record.get("kind") or ""),
            categories=_as_tuple(record.get("categories")),
            tool_required=record.get("tool_required"),
            materials_gain=_as_tuple(record.get("materials_gain")),
            gold_cost=int(record.get("gold_cost") or 0),
        )


class Corpus:
    """Ordered, immutable collection of entities with id lookup.

    Duplicate ids are undefined behaviour upstream; the corpus keeps the
    first record for lookup (iteration still yields every record, so graph
    construction and the corpus validator see the same input) and logs a
    warning.

    Thread safety: instances are never mutated after construction and may be
    shared freely between threads.
    """

    def __init__(self, entities: Iterable[Entity] = ()) -> None:
        self._entities: tuple[Entity, ...] = tuple(entities)
        self._by_id: dict[str, Entity] = {}
        for entity in self._entities:
            if entity.id in self._by_id:
                logger.warning("Duplicate entity id in corpus: %s", entity.id)
                continue
            self._by_id[entity.id] = entity

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> Corpus:
        """Build a corpus from raw feed records (see ``Entity.from_mapping``)."""
        return cls(Entity.from_mapping(r) for r in records)

    def get(self, entity_id: str) -> Entity | None:
        """Return the entity with this id, or None."""
        return self._by_id.get(entity_id)

    @property
    def ids(self) -> frozenset[str]:
        """Return the set of known entity ids."""
        return frozenset(self._by_id)

    @property
    def entities(self) -> tuple[Entity, ...]:
        """Return every record in feed order."""
        return self._entities

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._by_id

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)
