"""Locate performance report files in a workspace.

An include pattern is first treated as a glob relative to the workspace
(``**/results/*.xml``). When that matches no files, or the pattern cannot be
used as a glob, it is read as a legacy list of files and directories separated
by ``;``, ``:`` or ``,`` (``results/a.xml;more-results``). Only regular files
are ever returned.
"""

import re
from collections.abc import Iterable
from pathlib import Path

from perfgate.common.logging import get_logger

logger = get_logger(__name__)

LEGACY_SEPARATORS = re.compile(r"\s*[;:,]+\s*")


def locate_reports(
    root: str | Path,
    include_pattern: str,
    exclude: Iterable[str | Path] = (),
) -> list[Path]:
    """Resolve an include pattern into the report files under ``root``.

    Args:
        root: Workspace directory to search
        include_pattern: Glob pattern, or a ``;:,`` separated list of paths
        exclude: Directories whose contents are never reported, such as a
            build store kept inside the workspace

    Returns:
        Files matched by the glob if any, otherwise the files named by the
        legacy list. Either may be empty; lookup never raises.
    """
    root = Path(root)
    excluded = [Path(p).resolve() for p in exclude]

    matches = _without_excluded(_glob_reports(root, include_pattern), excluded)
    if matches:
        return matches

    return _without_excluded(_legacy_reports(root, include_pattern), excluded)


def _without_excluded(files: list[Path], excluded: list[Path]) -> list[Path]:
    if not excluded:
        return files
    return [f for f in files if not any(f.resolve().is_relative_to(d) for d in excluded)]


def _glob_reports(root: Path, include_pattern: str) -> list[Path]:
    try:
        return sorted(p for p in root.glob(include_pattern) if p.is_file())
    except (OSError, ValueError, NotImplementedError) as e:
        logger.debug(
            "Glob lookup failed, falling back to legacy lookup",
            {"root": root, "pattern": include_pattern, "error": str(e)},
        )
        return []


def _legacy_reports(root: Path, include_pattern: str) -> list[Path]:
    files: list[Path] = []
    for part in LEGACY_SEPARATORS.split(include_pattern):
        if not part:
            continue
        src = root / part
        if src.is_dir():
            files.extend(sorted(p for p in src.rglob("*") if p.is_file()))
        elif src.is_file():
            files.append(src)
    return files
