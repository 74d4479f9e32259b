from collections.abc import Callable

from perfgate.common.logging import get_logger
from perfgate.common.models import Outcome, Report
from perfgate.evaluator.context import BuildContext

logger = get_logger(__name__)


class OutcomeAggregator:
    """Folds per-report outcomes into the build's worst-seen outcome.

    The build outcome only ever moves towards FAILURE. Every change goes
    through ``BuildContext.set_outcome`` so the host sees the same value.
    """

    def __init__(self, context: BuildContext, log: Callable[[str], None]) -> None:
        self._context = context
        self._log = log

    @property
    def outcome(self) -> Outcome:
        return self._context.outcome

    def fold(self, outcome: Outcome) -> Outcome:
        if outcome.is_worse_than(self._context.outcome):
            self._context.set_outcome(outcome)
        return self._context.outcome

    def missing_reports(self, parser_name: str, glob: str) -> Outcome:
        """Apply the no-reports rule for a parser whose glob matched nothing.

        An already failed build is left as is. Otherwise the build fails,
        since the expected report was never generated. Either way the caller
        stops evaluating.
        """
        if self.outcome.is_worse_than(Outcome.UNSTABLE):
            logger.warning(
                "No reports found for already failed build",
                {"parser": parser_name, "glob": glob},
            )
            return self.outcome

        self.fold(Outcome.FAILURE)
        self._log(
            f"Performance: no {parser_name} files matching '{glob}' have been found. "
            f"Has the report generated?. Setting Build to {self.outcome}"
        )
        return self.outcome

    def record(self, report: Report, outcome: Outcome) -> Outcome:
        """Fold one classified report and log its summary line."""
        build_outcome = self.fold(outcome)
        self._log(
            f"Performance: File {report.report_file_name} reported "
            f"{report.error_percent}% of errors, "
            f"{report.average_diff_percent}% ({report.average_diff} ms) in performance change "
            f"[{outcome}]. Build status is: {build_outcome}"
        )
        return build_outcome
