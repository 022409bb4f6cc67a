"""Output writers for export closures."""
