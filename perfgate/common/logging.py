"""Structured JSON logging module for perfgate."""

import json
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from filelock import FileLock

DEFAULT_LOG_PATH = Path("data/logs/perfgate.jsonl")

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)
_build_number: ContextVar[int | None] = ContextVar("build_number", default=None)


def generate_id() -> str:
    """Generate a UUID with timestamp-based fallback.

    Returns:
        UUID string, or an ISO8601 timestamp with microseconds as fallback

    Example:
        >>> id = generate_id()
        >>> isinstance(id, str)
        True
    """
    try:
        return str(uuid.uuid4())
    except OSError:
        # No entropy source available
        return datetime.now(tz=UTC).isoformat()


def set_run_id(run_id: str | None) -> None:
    """Set the run ID for the current context.

    Example:
        >>> set_run_id("abc123")
        >>> get_run_id()
        'abc123'
        >>> set_run_id(None)
    """
    _run_id.set(run_id)


def get_run_id() -> str | None:
    return _run_id.get()


def set_build_number(build_number: int | None) -> None:
    """Set the number of the build being evaluated in the current context.

    Example:
        >>> set_build_number(42)
        >>> get_build_number()
        42
        >>> set_build_number(None)
    """
    _build_number.set(build_number)


def get_build_number() -> int | None:
    return _build_number.get()


class JSONLogger:
    """Logger that writes JSON Lines to a file with consistent metadata."""

    def __init__(self, name: str, log_path: str | Path = DEFAULT_LOG_PATH):
        self.name = name
        self.log_path = log_path

    @property
    def log_path(self) -> Path:
        """Get the log file path."""
        return self._log_path

    @log_path.setter
    def log_path(self, value: str | Path) -> None:
        """Set the log file path."""
        self._log_path = Path(value)
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock_path = self._log_path.with_suffix(self._log_path.suffix + ".lock")

    def _serialize_value(self, value: Any) -> Any:
        """Convert non-serializable values to string representation.

        Args:
            value: Value to serialize

        Returns:
            JSON-serializable value
        """
        if isinstance(value, (str, int, float, bool, type(None))):
            return value
        if isinstance(value, (list, tuple, set)):
            return [self._serialize_value(v) for v in value]
        if isinstance(value, dict):
            return {str(k): self._serialize_value(v) for k, v in value.items()}
        return str(value)

    def _log(self, level: str, message: str, metadata: dict[str, Any] | None = None) -> None:
        """Write a log entry as a JSON line.

        Args:
            level: Log level (e.g., "info", "error", "warning", "debug")
            message: Log message
            metadata: Optional metadata dict to include in log entry
        """
        entry: dict[str, Any] = {
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "level": level,
            "logger": self.name,
            "message": message,
        }

        run_id = get_run_id()
        if run_id:
            entry["run_id"] = run_id

        build_number = get_build_number()
        if build_number is not None:
            entry["build_number"] = build_number

        if metadata:
            entry["metadata"] = self._serialize_value(metadata)

        json_line = json.dumps(entry, ensure_ascii=False)

        with FileLock(self._lock_path):
            with self._log_path.open("a", encoding="utf-8") as f:
                f.write(json_line + "\n")

    def info(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        self._log("info", message, metadata)

    def error(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        self._log("error", message, metadata)

    def warning(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        self._log("warning", message, metadata)

    def debug(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        self._log("debug", message, metadata)


_loggers: dict[str, JSONLogger] = {}
_log_path: Path = DEFAULT_LOG_PATH


def configure_log_path(log_path: str | Path) -> None:
    """Route every logger, existing and future, to ``log_path``."""
    global _log_path

    _log_path = Path(log_path)
    for logger in _loggers.values():
        logger.log_path = _log_path


def get_logger(name: str) -> JSONLogger:
    """Get or create a logger with the given name.

    Args:
        name: Logger name (typically module name, e.g., "perfgate.evaluator.publisher")

    Returns:
        JSONLogger instance
    """
    if name not in _loggers:
        _loggers[name] = JSONLogger(name, _log_path)
    return _loggers[name]
