"""Wikiclean exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class WikiCleanError(Exception):
    """Base exception for all wikiclean failures."""


class WikiCleanConfigError(WikiCleanError):
    """Raised for invalid runtime configuration."""


class WikiCleanIngestError(WikiCleanError):
    """Raised for dump reading and page parsing failures."""


class WikiCleanTransformError(WikiCleanError):
    """Raised when the external text transformer fails for one page."""


class WikiCleanStoreError(WikiCleanError):
    """Raised for page serialization and output writing failures."""


class WikiCleanPipelineError(WikiCleanError):
    """Raised when the pipeline is cancelled or a stage aborts."""
