"""
File parsers module.
"""

from parsers.csv_parser import (
    read_csv,
    parse_csv,
    serialize_csv,
    CSVTable,
)

__all__ = [
    "read_csv",
    "parse_csv",
    "serialize_csv",
    "CSVTable",
]
