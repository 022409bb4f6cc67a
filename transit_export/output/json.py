"""JSON output of export closures and reports."""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from transit_export.export.exportable import ExportableData
from transit_export.model.models import ExportReport, Timetable

logger = logging.getLogger(__name__)

# closure sets written as identifier lists
_ENTITY_SETS = (
    "routes",
    "journey_patterns",
    "vehicle_journeys",
    "stop_points",
    "stop_areas",
    "stop_places",
    "commercial_stop_points",
    "boarding_positions",
    "quays",
    "connection_links",
    "access_points",
    "access_links",
    "companies",
    "group_of_lines",
)


def write_json_files(output_path: Path, collection: ExportableData) -> dict[str, str]:
    """Write the closure of one line to <line_id>.json."""
    if collection.line is None:
        raise ValueError("Cannot write a closure without a line")

    output_path.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "line": collection.line.object_id,
        "network": collection.network.object_id if collection.network else None,
        "timetables": [_timetable_to_dict(timetable) for timetable in collection.timetables],
        "stats": asdict(collection.stats()),
    }
    for name in _ENTITY_SETS:
        data[name] = getattr(collection, name).ids()

    filename = f"{collection.line.object_id}.json"
    line_path = output_path / filename
    with open(line_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
    logger.info(f"Wrote {line_path}")

    return {filename: str(line_path)}


def write_report(output_path: Path, report: ExportReport) -> dict[str, str]:
    """Write the job report to report.json."""
    output_path.mkdir(parents=True, exist_ok=True)

    report_data = {
        "lines": [
            {
                "line_id": info.line_id,
                "name": info.name,
                "status": info.status.value,
                "stats": asdict(info.stats),
                "errors": [
                    {"code": error.code.value, "description": error.description}
                    for error in info.errors
                ],
            }
            for info in report.lines
        ],
        "stats": asdict(report.stats),
    }

    report_path = output_path / "report.json"
    with open(report_path, "w", encoding="utf-8") as f:
        json.dump(report_data, f, indent=2, sort_keys=True)
    logger.info(f"Wrote {report_path}")

    return {"report.json": str(report_path)}


def _timetable_to_dict(timetable: Timetable) -> dict[str, Any]:
    return {
        "id": timetable.object_id,
        "day_types": [day_type.value for day_type in timetable.day_types],
        "calendar_days": [
            {"date": day.day.isoformat(), "included": day.included}
            for day in timetable.calendar_days
        ],
        "periods": [
            {"start": period.start.isoformat(), "end": period.end.isoformat()}
            for period in timetable.periods
        ],
        "start_of_period": _iso(timetable.start_of_period),
        "end_of_period": _iso(timetable.end_of_period),
    }


def _iso(value: Any) -> str | None:
    return value.isoformat() if value is not None else None

