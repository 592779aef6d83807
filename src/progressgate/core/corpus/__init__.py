"""Entity corpus: immutable catalog records and the corpus feed loader.

All public names are re-exported here::

    from progressgate.core.corpus import Corpus, Entity, load_corpus
"""

from progressgate.core.corpus.loader import load_corpus
from progressgate.core.corpus.models import (
    Corpus,
    Entity,
    normalize_id,
    split_prerequisites,
)

__all__ = [
    "Corpus",
    "Entity",
    "load_corpus",
    "normalize_id",
    "split_prerequisites",
]
