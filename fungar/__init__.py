"""
FUNGAR - detection of antifungal resistance mutations in sequencing reads

Reads DIAMOND blastx tabular output and reports which cataloged resistance mutations each read carries.
"""

__version__ = "1.0.0"

from fungar.catalog import MutationCatalog, MutationRecord, load_catalog
from fungar.scanner import Finding, Scanner, map_position, scan, scan_file
from fungar.aggregate import aggregate, write_tables
from fungar.errors import FungarError, SchemaError, ParseError, MalformedRecord, MissingStream

__all__ = [
    "__version__",
    "MutationCatalog", "MutationRecord", "load_catalog",
    "Finding", "Scanner", "map_position", "scan", "scan_file",
    "aggregate", "write_tables",
    "FungarError", "SchemaError", "ParseError", "MalformedRecord", "MissingStream",
]
