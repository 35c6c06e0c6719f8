"""Dump ingestion and pipeline coordination.

This package streams pages out of an XML dump and runs the
decode, transform, and write stages of one cleaning pass.
"""
