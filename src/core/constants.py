"""Core constants used across wikiclean modules.

This module centralizes dump markers, sentinels, and runtime defaults.
Keeping values here avoids magic literals in pipeline logic.
"""

from __future__ import annotations

PAGE_TAG = "page"
REDIRECT_MARKER = "#REDIRECT"
LINK_OPEN = "[["
LINK_CLOSE = "]]"
LINK_OPEN_SENTINEL = "<SPEC_START>"
LINK_CLOSE_SENTINEL = "<SPEC_END>"
ENCODED_NEWLINE_ARTIFACTS = ("&#xA;", "&#10;")
XML_NAMESPACE_URI = "http://www.w3.org/XML/1998/namespace"
EXPORT_NAMESPACE_URI = "http://www.mediawiki.org/xml/export-0.10/"
RECORD_INDENT = "    "
DEFAULT_WORKER_COUNT = 1
DEFAULT_QUEUE_SIZE = 1
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TRANSFORMER_DIR_NAME = "scripts"
DEFAULT_TRANSFORMER_FILE_NAME = "parse_xml"
CHANNEL_POLL_SECONDS = 0.1
OUTPUT_ENCODING = "utf-8"
