"""Corpus Validator: offline static analysis of an entity corpus.

Detects structural defects (cycles, dangling prerequisites, an unaffordable
bootstrap entity) and consistency concerns (stage and tool gating, material
reachability) before data ships.

Submodules
----------
- ``models``: Data types (Severity, FindingKind, Finding, CorpusReport, QuickCheck).
- ``engine``: The CorpusValidator class.

All public names are re-exported here::

    from progressgate.core.analyzer import CorpusValidator, CorpusReport, Finding, Severity
"""

from progressgate.core.analyzer.models import (
    CorpusReport,
    Finding,
    FindingKind,
    QuickCheck,
    Severity,
)
from progressgate.core.analyzer.engine import CorpusValidator

__all__ = [
    "CorpusReport",
    "CorpusValidator",
    "Finding",
    "FindingKind",
    "QuickCheck",
    "Severity",
]
