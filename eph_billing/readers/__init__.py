"""
Data readers for raw entry and billing configuration documents.
"""

from .json_reader import (
    load_document,
    parse_raw_entries,
    read_billing_config,
    read_raw_entries,
)

__all__ = [
    "load_document",
    "parse_raw_entries",
    "read_billing_config",
    "read_raw_entries",
]
