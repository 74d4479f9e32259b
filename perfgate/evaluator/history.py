"""Correlate current reports with the previous build's reports.

Reports are matched across builds by normalized file name. The previous
build's reports are loaded once into a read-only map and are never modified.
"""

from collections.abc import Iterable, Mapping

from perfgate.common.logging import get_logger
from perfgate.common.models import Report
from perfgate.evaluator.context import BuildContext
from perfgate.evaluator.naming import normalize_report_name

logger = get_logger(__name__)


def load_previous_reports(context: BuildContext) -> dict[str, Report]:
    """Load the previous build's reports keyed by normalized name.

    Returns an empty map when there is no previous build or it recorded no
    performance data. A first build is not an error.
    """
    previous = context.previous_build()
    if previous is None:
        logger.debug("No previous build", {"build": context.number})
        return {}

    if not previous.has_performance_data():
        logger.debug("Previous build has no performance data", {"previous": previous.number})
        return {}

    history = {normalize_report_name(r.report_file_name): r for r in previous.load_reports()}
    logger.info("Loaded previous reports", {"previous": previous.number, "reports": len(history)})
    return history


def correlate(reports: Iterable[Report], previous_reports: Mapping[str, Report]) -> list[Report]:
    """Attach each report's predecessor from ``previous_reports``.

    Reports with no predecessor are left untouched, so their deltas stay 0.
    """
    correlated = []
    for report in reports:
        last_report = previous_reports.get(normalize_report_name(report.report_file_name))
        if last_report is not None:
            report.attach_previous(last_report)
        correlated.append(report)
    return correlated
