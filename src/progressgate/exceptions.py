"""progressgate exception hierarchy.

All public exceptions inherit from ProgressGateError, giving callers a single
base class to catch when they want to handle any progressgate-specific failure
without swallowing unrelated errors.

Only the file and configuration edges raise. Graph construction, token
resolution, action validation and corpus validation always return result
values carrying their diagnostics.
"""


class ProgressGateError(Exception):
    """Base exception for all progressgate errors."""


class CorpusLoadError(ProgressGateError):
    """Raised when a corpus feed file cannot be read or is malformed.

    Covers unreadable files, invalid YAML/JSON, records without an id,
    and prerequisite fields of the wrong shape.
    """


class SnapshotLoadError(ProgressGateError):
    """Raised when a progression snapshot file cannot be read or is malformed."""


class RuleConfigError(ProgressGateError):
    """Raised when injected rule tables are invalid.

    Covers negative thresholds, a non-positive crafting capacity or cache
    generation count, and unknown configuration keys.
    """
