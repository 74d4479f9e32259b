"""Evaluation entry point.

Coordinates one evaluation run over a build:
1. Log the configured thresholds
2. For each parser, in configured order: locate its report files, copy them
   into the build's storage, parse them, attach each report's predecessor from
   the previous build, classify it and fold the result into the build outcome
3. Persist the evaluated reports as the next build's history, also when the
   run stopped on a parser without report files

Evaluation is synchronous. I/O errors while copying or parsing propagate and
abort the run.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from perfgate.common.config import ThresholdConfig
from perfgate.common.logging import generate_id, get_logger, set_build_number, set_run_id
from perfgate.common.models import Outcome, Report
from perfgate.evaluator.aggregator import OutcomeAggregator
from perfgate.evaluator.context import BuildContext
from perfgate.evaluator.history import correlate, load_previous_reports
from perfgate.evaluator.ingestor import ReportParser, ingest_reports, materialize_reports
from perfgate.evaluator.locator import locate_reports
from perfgate.evaluator.thresholds import classify

logger = get_logger(__name__)


@dataclass
class EvaluationResult:
    """Outcome of one evaluation run and the build log it produced."""

    outcome: Outcome
    reports: list[Report] = field(default_factory=list)
    log_lines: list[str] = field(default_factory=list)


def describe_thresholds(config: ThresholdConfig) -> list[str]:
    """Build-log lines describing each threshold.

    Error and percentage thresholds are clamped into [0, 100] and so are always
    active. Only the time thresholds can be disabled.
    """
    lines = []
    for outcome, error, percent, time in (
        (
            Outcome.UNSTABLE,
            config.error_unstable,
            config.perf_percent_unstable,
            config.perf_time_unstable,
        ),
        (Outcome.FAILURE, config.error_failed, config.perf_percent_failed, config.perf_time_failed),
    ):
        level = str(outcome).lower()
        lines.append(
            f"Performance: Percentage of errors greater or equal than {error}% "
            f"sets the build as {level}"
        )
        lines.append(
            f"Performance: Average response time increase greater than {percent}% "
            f"sets the build as {level} when the time threshold is also exceeded"
        )
        if ThresholdConfig.is_enabled(time):
            lines.append(
                f"Performance: Average response time increase greater than {time} ms "
                f"sets the build as {level} when the percentage threshold is also exceeded"
            )
        else:
            lines.append(
                f"Performance: No response time threshold configured for making the test {level}"
            )
    return lines


def evaluate_build(
    context: BuildContext,
    config: ThresholdConfig,
    parsers: Sequence[ReportParser],
    log_callback: Callable[[str], None] | None = None,
) -> EvaluationResult:
    """Evaluate the performance reports of one build.

    Args:
        context: The build being evaluated
        config: Thresholds to classify reports against
        parsers: Report parsers, processed in order
        log_callback: Optional callback receiving each build-log line as it is produced

    Returns:
        EvaluationResult with the final build outcome, the evaluated reports
        and the build log

    Negative case:
        A parser whose glob matches nothing fails the build and ends the run
    """
    set_run_id(generate_id())
    set_build_number(context.number)

    result = EvaluationResult(outcome=context.outcome)

    def log(line: str) -> None:
        result.log_lines.append(line)
        logger.info(line)
        if log_callback:
            log_callback(line)

    for line in describe_thresholds(config):
        log(line)

    aggregator = OutcomeAggregator(context, log)
    previous_reports: dict[str, Report] | None = None

    for parser in parsers:
        log(f"Performance: Recording {parser.display_name} reports '{parser.glob}'")

        files = locate_reports(context.workspace, parser.glob, exclude=[context.builds_dir])
        if not files:
            aggregator.missing_reports(parser.display_name, parser.glob)
            break

        local_reports = materialize_reports(files, context.root_dir, parser.display_name, log)
        reports = ingest_reports(parser, local_reports, context)

        if previous_reports is None:
            previous_reports = load_previous_reports(context)

        for report in correlate(reports, previous_reports):
            outcome = classify(
                report.error_percent,
                report.average_diff,
                report.average_diff_percent,
                config,
            )
            aggregator.record(report, outcome)
            result.reports.append(report)

    context.save_reports(result.reports)

    result.outcome = aggregator.outcome
    logger.info(
        "Evaluation completed",
        {"outcome": result.outcome, "reports": len(result.reports), "parsers": len(parsers)},
    )
    return result
