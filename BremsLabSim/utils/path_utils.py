"""Path checks for the files a session writes (recordings, field exports)."""

from pathlib import Path
from typing import Sequence, Union


class PathValidationError(Exception):
    """Raised when path validation fails."""
    pass


def validate_path(path: Union[str, Path], must_exist: bool = False) -> Path:
    """Resolve a path and reject directory traversal.

    Args:
        path: Path to validate
        must_exist: If True, path must exist

    Returns:
        Resolved Path object

    Raises:
        PathValidationError: If path is invalid or unsafe
    """
    if '..' in Path(path).parts:
        raise PathValidationError(f"Path contains directory traversal: {path}")

    try:
        path_obj = Path(path).resolve()
    except (ValueError, OSError) as e:
        raise PathValidationError(f"Invalid path: {path}") from e

    if must_exist and not path_obj.exists():
        raise PathValidationError(f"Path does not exist: {path}")

    return path_obj


def validate_output_path(
    path: Union[str, Path],
    suffixes: Sequence[str] = (),
    create_parents: bool = True
) -> Path:
    """Validate and prepare an output file path.

    Args:
        path: Output path to validate
        suffixes: Accepted file endings (any ending when empty)
        create_parents: If True, create parent directories

    Returns:
        Validated Path object

    Raises:
        PathValidationError: If path is invalid or has the wrong ending
    """
    path_obj = validate_path(path, must_exist=False)

    if suffixes and not any(path_obj.name.endswith(s) for s in suffixes):
        raise PathValidationError(
            f"Output file must end with one of {list(suffixes)}, got: {path}"
        )

    if create_parents:
        try:
            path_obj.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PathValidationError(
                f"Cannot create parent directories for: {path}"
            ) from e

    return path_obj
