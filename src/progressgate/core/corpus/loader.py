"""Corpus feed loading from YAML or JSON files.

The feed is either a top-level list of entity records or a mapping with an
``entities`` list. JSON is a subset of YAML, so both go through
``yaml.safe_load``::

    entities:
      - id: hoe
        prerequisites: []
      - id: till_soil
        prerequisites: [hoe, farm_stage_1]
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from progressgate.core.corpus.models import Corpus, Entity
from progressgate.exceptions import CorpusLoadError

logger = logging.getLogger(__name__)


def load_corpus(path: Path | str) -> Corpus:
    """Load a corpus from a YAML or JSON feed file.

    Args:
        path: Feed file path.

    Returns:
        The loaded ``Corpus``.

    Raises:
        CorpusLoadError: If the file cannot be read or parsed, is not a list
            of records, or contains a record without a usable id.
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise CorpusLoadError(f"Could not read corpus from {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("entities")
    if data is None:
        data = []
    if not isinstance(data, list):
        raise CorpusLoadError(f"Corpus in {path} must be a list of entity records")

    entities: list[Entity] = []
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise CorpusLoadError(f"Record #{index} in {path} is not a mapping")
        try:
            entities.append(Entity.from_mapping(record))
        except (TypeError, ValueError) as exc:
            raise CorpusLoadError(f"Record #{index} in {path}: {exc}") from exc

    logger.debug("Loaded %d entities from %s", len(entities), path)
    return Corpus(entities)
