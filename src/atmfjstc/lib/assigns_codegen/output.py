"""
Writing generated modules to disk.

Generated files are only rewritten when their content actually changes, so that build tools relying on timestamps do
not see spurious modifications. When a file is rewritten, the previous version is first moved out of the way and is
restored if writing the new version fails, so that a failed run never leaves a truncated module behind.
"""

import logging

from contextlib import suppress
from pathlib import Path
from typing import Optional, Union

from atmfjstc.lib.assigns_codegen.errors import GeneratedFileError


LOG = logging.getLogger(__name__)


def read_generated_file(path: Union[str, Path]) -> Optional[str]:
    """
    Returns the current content of a generated file, or None if it does not exist.
    """
    try:
        return Path(path).read_text(encoding='utf-8')
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise GeneratedFileError(Path(path), f"Could not read generated file '{path}'") from e


def is_up_to_date(path: Union[str, Path], text: str) -> bool:
    return read_generated_file(path) == text


def write_generated_file(path: Union[str, Path], text: str) -> bool:
    """
    Writes a generated file, unless its current content is already identical.

    Parent directories are created as needed.

    Returns:
        True if the file was written, False if it was already up to date.

    Raises:
        GeneratedFileError: If the file could not be written. The previous version, if any, is left in place.
    """
    path = Path(path)

    if is_up_to_date(path, text):
        LOG.debug("%s is up to date", path)
        return False

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise GeneratedFileError(path, f"Can't create parent directory '{path.parent}' for '{path}'") from e

    backup_path = _move_previous_version(path)

    try:
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(text)
    except OSError as e:
        with suppress(OSError):
            path.unlink()
        if backup_path is not None:
            backup_path.rename(path)

        raise GeneratedFileError(path) from e

    if backup_path is not None:
        with suppress(OSError):
            backup_path.unlink()

    LOG.debug("Wrote %s", path)

    return True


def _move_previous_version(path: Path) -> Optional[Path]:
    if not path.exists():
        return None

    if not path.is_file():
        raise GeneratedFileError(path, f"Can't write '{path}' because a non-file entry by that name already exists")

    backup_path = path.with_name(path.name + '.backup')
    if backup_path.exists():
        raise GeneratedFileError(
            path, f"Can't back up '{path}' as '{backup_path}' already exists (left over from a crashed run?)"
        )

    try:
        path.rename(backup_path)
    except OSError as e:
        raise GeneratedFileError(path, f"Can't move the previous version of '{path}' out of the way") from e

    return backup_path
