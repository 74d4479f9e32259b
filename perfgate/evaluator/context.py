"""Build context: the narrow view of the host build an evaluation needs.

An evaluation never reaches for global build state. It is handed a
``BuildContext`` exposing the workspace to search, the directory the build
stores its reports in, the previous build, and a worst-outcome setter.

``FileBuildStore`` provides a filesystem-backed implementation: every build is a
numbered directory holding a ``build.json`` record and the reports evaluated in
that build, which become the history of the next build.
"""

from pathlib import Path
from typing import Protocol

from filelock import FileLock

from perfgate.common.logging import get_logger
from perfgate.common.models import BuildRecord, Outcome, Report
from perfgate.common.persistence import (
    read_json_model,
    read_jsonl,
    write_json_model,
    write_jsonl,
)

logger = get_logger(__name__)

BUILD_RECORD_FILE = "build.json"
REPORT_STORE_FILE = "performance-reports.jsonl"
STORE_LOCK_FILE = ".builds.lock"


class BuildContext(Protocol):
    """What the evaluation core needs from the host build runtime."""

    @property
    def number(self) -> int: ...

    @property
    def workspace(self) -> Path: ...

    @property
    def root_dir(self) -> Path: ...

    @property
    def builds_dir(self) -> Path:
        """Directory holding every build's storage. Never searched for reports."""
        ...

    @property
    def outcome(self) -> Outcome: ...

    def set_outcome(self, outcome: Outcome) -> None:
        """Record ``outcome`` if it is worse than the current one, otherwise no-op."""
        ...

    def previous_build(self) -> "BuildContext | None": ...

    def has_performance_data(self) -> bool: ...

    def load_reports(self) -> list[Report]: ...

    def save_reports(self, reports: list[Report]) -> None: ...


class FileBuildContext:
    """A build backed by ``{builds_dir}/{number}/``."""

    def __init__(self, store: "FileBuildStore", record: BuildRecord, workspace: Path) -> None:
        self._store = store
        self._record = record
        self._workspace = workspace

    @property
    def number(self) -> int:
        return self._record.number

    @property
    def workspace(self) -> Path:
        return self._workspace

    @property
    def root_dir(self) -> Path:
        return self._store.build_dir(self.number)

    @property
    def builds_dir(self) -> Path:
        return self._store.builds_dir

    @property
    def outcome(self) -> Outcome:
        return self._record.outcome

    @property
    def record(self) -> BuildRecord:
        return self._record

    def set_outcome(self, outcome: Outcome) -> None:
        if outcome.is_worse_than(self._record.outcome):
            self._record = self._record.model_copy(update={"outcome": outcome})
            self._save_record()

    def previous_build(self) -> "FileBuildContext | None":
        return self._store.previous_build(self.number, self._workspace)

    def has_performance_data(self) -> bool:
        return self._record.has_performance_data and self.report_store_path.exists()

    @property
    def report_store_path(self) -> Path:
        return self.root_dir / REPORT_STORE_FILE

    def load_reports(self) -> list[Report]:
        if not self.report_store_path.exists():
            return []
        return read_jsonl(self.report_store_path, Report)

    def save_reports(self, reports: list[Report]) -> None:
        write_jsonl(self.report_store_path, reports)
        self._record = self._record.model_copy(update={"has_performance_data": True})
        self._save_record()

    def _save_record(self) -> None:
        write_json_model(self.root_dir / BUILD_RECORD_FILE, self._record)


class FileBuildStore:
    """Numbered build directories under ``builds_dir``.

    Example:
        >>> store = FileBuildStore("data/builds")
        >>> build = store.new_build(workspace=Path("."))
        >>> build.previous_build() is None or build.previous_build().number < build.number
        True
    """

    def __init__(self, builds_dir: str | Path) -> None:
        self.builds_dir = Path(builds_dir)

    def build_dir(self, number: int) -> Path:
        return self.builds_dir / str(number)

    def build_numbers(self) -> list[int]:
        if not self.builds_dir.is_dir():
            return []
        return sorted(
            int(child.name)
            for child in self.builds_dir.iterdir()
            if child.is_dir() and child.name.isdigit()
        )

    def new_build(self, workspace: str | Path) -> FileBuildContext:
        """Allocate the next build number and persist its initial record.

        Allocation holds a store-wide lock, so concurrent runs sharing
        ``builds_dir`` never receive the same number.
        """
        self.builds_dir.mkdir(parents=True, exist_ok=True)
        with FileLock(self.builds_dir / STORE_LOCK_FILE):
            numbers = self.build_numbers()
            number = numbers[-1] + 1 if numbers else 1
            record = BuildRecord(number=number)
            write_json_model(self.build_dir(number) / BUILD_RECORD_FILE, record)
        logger.info("Allocated build", {"number": number, "builds_dir": self.builds_dir})
        return FileBuildContext(self, record, Path(workspace))

    def get_build(self, number: int, workspace: str | Path) -> FileBuildContext | None:
        record = read_json_model(self.build_dir(number) / BUILD_RECORD_FILE, BuildRecord)
        if record is None:
            return None
        return FileBuildContext(self, record, Path(workspace))

    def previous_build(self, number: int, workspace: str | Path) -> FileBuildContext | None:
        """Return the nearest recorded build numbered below ``number``."""
        for candidate in reversed(self.build_numbers()):
            if candidate >= number:
                continue
            build = self.get_build(candidate, workspace)
            if build is not None:
                return build
        return None
