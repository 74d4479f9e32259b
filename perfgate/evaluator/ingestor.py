"""Report ingestion: materialize located files and hand them to a parser.

The ingestor owns no format knowledge. A parser is any object satisfying
``ReportParser``; parsers are looked up by format name in an explicit registry
populated with ``register_parser``.
"""

import json
import shutil
import statistics
from collections.abc import Callable, Collection, Sequence
from pathlib import Path
from typing import Any, Protocol

from perfgate.common.config import ConfigError, ParserConfig
from perfgate.common.logging import get_logger
from perfgate.common.models import Report
from perfgate.evaluator.context import BuildContext
from perfgate.evaluator.naming import normalize_report_name

logger = get_logger(__name__)

LogCallback = Callable[[str], None]


class ReportParser(Protocol):
    """A format-specific parser producing canonical reports.

    ``parse`` must return reports with ``report_file_name``, ``error_percent``
    and ``average_response_time`` populated, and must not raise for empty input.
    """

    format_name: str
    glob: str

    @property
    def display_name(self) -> str: ...

    def parse(self, files: Sequence[Path], context: BuildContext) -> Collection[Report]: ...


ParserFactory = Callable[[str], ReportParser]

_registry: dict[str, ParserFactory] = {}


def register_parser(format_name: str) -> Callable[[ParserFactory], ParserFactory]:
    """Class decorator registering a parser factory under ``format_name``.

    Example:
        >>> @register_parser("jtl")
        ... class JtlParser:
        ...     format_name = "jtl"
        ...     def __init__(self, glob): self.glob = glob
    """

    def decorator(factory: ParserFactory) -> ParserFactory:
        _registry[format_name] = factory
        return factory

    return decorator


def available_formats() -> list[str]:
    return sorted(_registry)


def get_parser(format_name: str, glob: str) -> ReportParser:
    """Instantiate the parser registered for ``format_name``.

    Raises:
        ConfigError: If no parser is registered under that name
    """
    factory = _registry.get(format_name)
    if factory is None:
        raise ConfigError(
            f"Unknown report format {format_name!r}. Available: {', '.join(available_formats())}"
        )
    return factory(glob)


def build_parsers(parser_configs: list[ParserConfig]) -> list[ReportParser]:
    return [get_parser(pc.format, pc.glob) for pc in parser_configs]


def stored_report_path(root_dir: Path, parser_display_name: str, report_name: str) -> Path:
    """Path a report file is stored under inside a build's root directory."""
    return root_dir / parser_display_name / normalize_report_name(report_name)


def materialize_reports(
    files: Sequence[Path],
    root_dir: Path,
    parser_display_name: str,
    log: LogCallback,
) -> list[Path]:
    """Copy located report files into the build's storage directory.

    Directories are logged and skipped. I/O errors propagate.

    Returns:
        Local copies, in the order the files were located
    """
    local_reports: list[Path] = []
    for src in files:
        if src.is_dir():
            log(f"Performance: File '{src.name}' is a directory, not a Performance Report")
            continue
        local_report = stored_report_path(root_dir, parser_display_name, src.name)
        local_report.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, local_report)
        local_reports.append(local_report)
    return local_reports


def ingest_reports(
    parser: ReportParser,
    local_files: Sequence[Path],
    context: BuildContext,
) -> list[Report]:
    """Parse local report files and tag each report with its provenance."""
    parsed = parser.parse(local_files, context)
    reports = [
        report.model_copy(
            update={
                "report_file_name": normalize_report_name(report.report_file_name),
                "parser_name": parser.display_name,
                "build_number": context.number,
            }
        )
        for report in parsed
    ]
    logger.info(
        "Parsed reports",
        {"parser": parser.display_name, "files": len(local_files), "reports": len(reports)},
    )
    return reports


@register_parser("summary")
class SummaryParser:
    """Reads pre-aggregated JSON summaries.

    Each file is either an object with ``errorPercent``, ``averageResponseTime``
    and optionally ``samples`` (a count), or a list of samples carrying
    ``elapsed`` (ms) and ``success``.
    """

    format_name = "summary"

    def __init__(self, glob: str = "**/*.json") -> None:
        self.glob = glob

    @property
    def display_name(self) -> str:
        return "Summary"

    def parse(self, files: Sequence[Path], context: BuildContext) -> list[Report]:
        return [self._parse_file(path) for path in files]

    def _parse_file(self, path: Path) -> Report:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, list):
            return self._from_samples(path.name, data)
        if isinstance(data, dict):
            return Report(
                report_file_name=path.name,
                error_percent=float(data.get("errorPercent", 0.0)),
                average_response_time=float(data.get("averageResponseTime", 0.0)),
                sample_count=int(data.get("samples", 0)),
            )
        raise ValueError(f"{path}: expected a JSON object or list, got {type(data).__name__}")

    def _from_samples(self, name: str, samples: list[dict[str, Any]]) -> Report:
        if not samples:
            return Report(report_file_name=name)
        errors = sum(1 for s in samples if not s.get("success", True))
        return Report(
            report_file_name=name,
            error_percent=errors * 100.0 / len(samples),
            average_response_time=statistics.fmean(float(s["elapsed"]) for s in samples),
            sample_count=len(samples),
        )
