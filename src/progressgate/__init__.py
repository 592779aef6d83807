"""progressgate: Prerequisite resolution and static validation for game progression data."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
