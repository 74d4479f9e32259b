from perfgate.evaluator.aggregator import OutcomeAggregator
from perfgate.evaluator.context import BuildContext, FileBuildContext, FileBuildStore
from perfgate.evaluator.history import correlate, load_previous_reports
from perfgate.evaluator.ingestor import (
    ReportParser,
    SummaryParser,
    available_formats,
    get_parser,
    ingest_reports,
    materialize_reports,
    register_parser,
)
from perfgate.evaluator.locator import locate_reports
from perfgate.evaluator.naming import normalize_report_name
from perfgate.evaluator.publisher import EvaluationResult, evaluate_build
from perfgate.evaluator.thresholds import classify, is_failure, is_unstable

__all__ = [
    "BuildContext",
    "EvaluationResult",
    "FileBuildContext",
    "FileBuildStore",
    "OutcomeAggregator",
    "ReportParser",
    "SummaryParser",
    "available_formats",
    "classify",
    "correlate",
    "evaluate_build",
    "get_parser",
    "ingest_reports",
    "is_failure",
    "is_unstable",
    "load_previous_reports",
    "locate_reports",
    "materialize_reports",
    "normalize_report_name",
    "register_parser",
]
