"""JSON and JSONL persistence utilities for reading and writing Pydantic models."""

import tempfile
from pathlib import Path
from typing import TypeVar

from filelock import FileLock
from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


def _lock_for(path: Path) -> FileLock:
    return FileLock(path.with_suffix(path.suffix + ".lock"))


def _atomic_write(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` through a temp file and rename."""
    fd, temp_path_str = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    temp_path = Path(temp_path_str)
    try:
        with open(fd, "w", encoding="utf-8") as f:
            f.write(content)
        temp_path.replace(path)
    finally:
        # Clean up temp file on error
        if temp_path.exists():
            temp_path.unlink()


def read_jsonl(path: str | Path, model_class: type[T]) -> list[T]:
    """Read all lines from a JSONL file as model instances.

    Args:
        path: Path to the JSONL file
        model_class: Pydantic model class to parse each line as

    Returns:
        List of model instances

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    results: list[T] = []
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                results.append(model_class.model_validate_json(line))

    return results


def write_jsonl(path: str | Path, objects: list[T]) -> None:
    """Write a list of Pydantic models to a JSONL file atomically.

    Args:
        path: Path to the JSONL file
        objects: List of Pydantic model instances to write
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with _lock_for(path):
        _atomic_write(path, "".join(obj.model_dump_json() + "\n" for obj in objects))


def write_json_model(path: str | Path, obj: BaseModel) -> None:
    """Write a single Pydantic model as an indented JSON document atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with _lock_for(path):
        _atomic_write(path, obj.model_dump_json(indent=2) + "\n")


def read_json_model(path: str | Path, model_class: type[T]) -> T | None:
    """Read a single Pydantic model from a JSON document.

    Returns:
        The model instance, or None if the file doesn't exist
    """
    path = Path(path)

    if not path.exists():
        return None

    return model_class.model_validate_json(path.read_text(encoding="utf-8"))
