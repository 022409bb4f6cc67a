"""Export closure collection."""

from transit_export.export.collector import DataCollector, collect
from transit_export.export.exportable import EntitySet, ExportableData
from transit_export.export.reduction import clip_timetable, reduce_timetable

__all__ = [
    "DataCollector",
    "EntitySet",
    "ExportableData",
    "clip_timetable",
    "collect",
    "reduce_timetable",
]
