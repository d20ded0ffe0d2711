import traceback

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class SourceLocation:
    """
    Identifies where a directive was declared.

    Directives declared from Python code carry a file and line. Directives read from a JSON manifest carry the manifest
    path and a JSON pointer (RFC 6901) to the directive, e.g. ``/units/0/directives/3``.
    """
    file: str
    line: Optional[int] = None
    pointer: Optional[str] = None

    def __str__(self) -> str:
        if self.line is not None:
            return f"{self.file}:{self.line}"
        if self.pointer is not None:
            return f"{self.file}#{self.pointer}"

        return self.file

    def child(self, key: Union[str, int]) -> 'SourceLocation':
        """
        Returns the location of an item inside the JSON value at this location.
        """
        escaped = str(key).replace('~', '~0').replace('/', '~1')

        return SourceLocation(self.file, pointer=f"{self.pointer or ''}/{escaped}")


def caller_location(skip: int = 0) -> SourceLocation:
    """
    Returns the location of the code that called the function calling this one.

    Args:
        skip: Additional stack frames to go up through (e.g. for wrappers around the calling function)
    """
    frame = traceback.extract_stack(limit=3 + skip)[0]

    return SourceLocation(frame.filename, line=frame.lineno)
