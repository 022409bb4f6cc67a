"""Transit Export - Collect de-duplicated line closures from a transit network."""

from transit_export.api import collect_line, export_lines, validate
from transit_export.version import SCHEMA_VERSION, VERSION

__version__ = VERSION
__all__ = ["SCHEMA_VERSION", "VERSION", "collect_line", "export_lines", "validate"]
