"""Exceptions raised by the roll-up package.

The engine itself never raises on malformed transaction data; these are
reserved for ingestion failures and invalid rule edits.
"""

from __future__ import annotations


class RollupError(Exception):
    """Base class for all package errors."""


class IngestError(RollupError):
    """A transaction file could not be read or lacks required columns."""


class RuleError(RollupError):
    """A roll-up rule edit was rejected."""
