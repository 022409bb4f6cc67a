"""Public API for transit-export."""

import logging
from datetime import UTC, date, datetime
from pathlib import Path

from transit_export.export.collector import DataCollector
from transit_export.export.exportable import ExportableData
from transit_export.model.models import (
    ExportConfig,
    ExportReport,
    LineError,
    LineErrorCode,
    LineInfo,
    LineState,
    ValidationReport,
)
from transit_export.model.network import TransitNetwork
from transit_export.model.reader import NetworkReader
from transit_export.model.validator import NetworkValidator
from transit_export.output.json import write_json_files, write_report

logger = logging.getLogger(__name__)


def collect_line(
    network: TransitNetwork,
    line_id: str,
    start_date: date | None = None,
    end_date: date | None = None,
) -> tuple[bool, ExportableData]:
    """
    Collect the exportable closure of one line.

    Args:
        network: Loaded network
        line_id: Identifier of the line to export
        start_date: Optional first date of the export window
        end_date: Optional last date of the export window

    Returns:
        Tuple of (line has data in the window, closure)
    """
    return DataCollector().collect(network, network.line(line_id), start_date, end_date)


def export_lines(
    input_path: str,
    output_path: str,
    config: ExportConfig | None = None,
) -> ExportReport:
    """
    Export the lines of a network snapshot, one closure file per line.

    Args:
        input_path: Path to the network JSON document
        output_path: Path to output directory
        config: Optional export configuration

    Returns:
        ExportReport with per-line outcome and merged stats
    """
    if config is None:
        config = ExportConfig(input_path=input_path, output_path=output_path)

    logger.info(f"Starting export: {input_path} -> {output_path}")
    start_time = datetime.now(UTC)

    # Read
    reader = NetworkReader(input_path)
    network = reader.read_all()

    # Validate
    validator = NetworkValidator(network, reader.rejected)
    validation_report = validator.validate()
    if not validation_report.valid:
        raise ValueError(f"Network validation failed with {len(validation_report.errors)} errors")

    line_ids = config.line_ids if config.line_ids is not None else list(network.lines)
    unknown = [line_id for line_id in line_ids if line_id not in network.lines]
    if unknown:
        raise ValueError(f"Unknown lines requested: {', '.join(unknown)}")

    output_dir = Path(output_path)
    report = ExportReport()
    collector = DataCollector()

    for line_id in line_ids:
        line = network.line(line_id)
        valid, collection = collector.collect(network, line, config.start_date, config.end_date)

        line_stats = collection.stats()
        info = LineInfo(
            line_id=line.object_id,
            name=f"{line.name} ({line.number})",
            stats=line_stats,
        )

        if valid:
            report.files.update(write_json_files(output_dir, collection))
            info.status = LineState.OK
            report.stats.merge(line_stats)
        else:
            logger.warning(f"Line {line.object_id} has no data on period")
            info.status = LineState.ERROR
            info.errors.append(
                LineError(code=LineErrorCode.NO_DATA_ON_PERIOD, description="no data on period")
            )

        report.lines.append(info)

    if config.write_report:
        report.files.update(write_report(output_dir, report))

    exported = sum(1 for info in report.lines if info.status is LineState.OK)
    elapsed = (datetime.now(UTC) - start_time).total_seconds()
    logger.info(f"Exported {exported}/{len(report.lines)} lines in {elapsed:.2f}s")

    return report


def validate(input_path: str) -> ValidationReport:
    """
    Validate a network snapshot.

    Args:
        input_path: Path to the network JSON document

    Returns:
        ValidationReport with results
    """
    logger.info(f"Validating network: {input_path}")

    reader = NetworkReader(input_path)
    network = reader.read_all()
    return NetworkValidator(network, reader.rejected).validate()
