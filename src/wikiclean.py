"""Public SDK surface for wikiclean.

This module provides a stable import path for library users.
It re-exports the pipeline entry points and typed models.
"""

from __future__ import annotations

from core.config import WikiCleanConfig
from core.errors import (
    WikiCleanConfigError,
    WikiCleanError,
    WikiCleanIngestError,
    WikiCleanPipelineError,
    WikiCleanStoreError,
    WikiCleanTransformError,
)
from core.types import Page, PipelineOptions, PipelineSummary
from ingest.dump_reader import iter_dump_pages
from ingest.pipeline import CleanPipelineRunner, clean_dump
from transforms.text_transformer import CallableTransformer, SubprocessTransformer, TextTransformer

__all__ = [
    "CallableTransformer",
    "CleanPipelineRunner",
    "Page",
    "PipelineOptions",
    "PipelineSummary",
    "SubprocessTransformer",
    "TextTransformer",
    "WikiCleanConfig",
    "WikiCleanConfigError",
    "WikiCleanError",
    "WikiCleanIngestError",
    "WikiCleanPipelineError",
    "WikiCleanStoreError",
    "WikiCleanTransformError",
    "clean_dump",
    "iter_dump_pages",
]
