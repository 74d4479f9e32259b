from pathlib import Path

import pytest

from perfgate.common.logging import configure_log_path, set_build_number, set_run_id


@pytest.fixture(autouse=True)
def isolated_log(tmp_path: Path):
    """Route structured logs into the test's temporary directory."""
    log_path = tmp_path / "logs" / "perfgate.jsonl"
    configure_log_path(log_path)
    yield log_path
    set_run_id(None)
    set_build_number(None)
