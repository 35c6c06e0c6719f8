"""Output dump persistence.

This package serializes cleaned pages and writes them, framed by a
fixed header and trailer, into the output dump.
"""
