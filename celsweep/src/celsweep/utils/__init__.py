"""Utility helpers for celsweep."""

from .io import (
    DOCUMENT_SUFFIXES,
    document_format,
    json_compatible,
    load_document,
    load_yaml,
    write_document,
)

__all__ = [
    "DOCUMENT_SUFFIXES",
    "document_format",
    "json_compatible",
    "load_document",
    "load_yaml",
    "write_document",
]
