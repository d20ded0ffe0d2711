"""
The data model for generation directives and the keys they resolve to.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, Tuple, Union, Sequence

from atmfjstc.lib.assigns_codegen.errors import InvalidDirectiveShape
from atmfjstc.lib.assigns_codegen.location import SourceLocation


RawNames = Union[str, Sequence[str]]


class Intent(Enum):
    """
    What kind of wrapper a directive asks for.
    """
    ASSIGN = auto()
    ASSIGN_LAZY = auto()
    UPDATE = auto()

    @property
    def function_prefix(self) -> str:
        return _FUNCTION_PREFIXES[self]


_FUNCTION_PREFIXES = {
    Intent.ASSIGN: 'assign_',
    Intent.ASSIGN_LAZY: 'assign_new_',
    Intent.UPDATE: 'update_',
}


class Visibility(Enum):
    PUBLIC = auto()
    PRIVATE = auto()


def sanitize_name(name: str) -> str:
    """
    Strips a single trailing ``?`` from a (boolean-style) name, e.g. ``connected?`` becomes ``connected``.
    """
    return name[:-1] if name.endswith('?') else name


def is_valid_name(name: Any) -> bool:
    """
    True if the value can be used as a directive name, i.e. a string that is a Python identifier once a single trailing
    ``?`` is removed.
    """
    return isinstance(name, str) and sanitize_name(name).isidentifier()


def parse_names(raw_names: Any, location: Optional[SourceLocation] = None) -> Tuple[str, ...]:
    """
    Normalizes the names given to a directive (a single name or a list of names) to a tuple of names.

    Raises:
        InvalidDirectiveShape: If the value is neither a valid name nor a non-empty list of valid names
    """
    if isinstance(raw_names, str):
        if not is_valid_name(raw_names):
            raise InvalidDirectiveShape(raw_names, "not a valid identifier", location)

        return (raw_names,)

    if not isinstance(raw_names, (list, tuple)):
        raise InvalidDirectiveShape(raw_names, "expected a name or a list of names", location)
    if len(raw_names) == 0:
        raise InvalidDirectiveShape(raw_names, "the list of names is empty", location)

    for index, name in enumerate(raw_names):
        if not is_valid_name(name):
            raise InvalidDirectiveShape(raw_names, f"item #{index} ({name!r}) is not a valid identifier", location)

    return tuple(raw_names)


@dataclass(frozen=True)
class ResolvedKey:
    """
    The unit of generation: one name, together with the intent and visibility of the directive that declared it.
    """
    intent: Intent
    visibility: Visibility
    name: str
    location: Optional[SourceLocation] = None

    @property
    def sanitized_name(self) -> str:
        return sanitize_name(self.name)

    @property
    def function_name(self) -> str:
        return self.intent.function_prefix + self.sanitized_name


@dataclass(frozen=True)
class Directive:
    """
    A request to generate one wrapper function for each of a list of names.

    The `names` may be given as a single string or as a list; they are normalized to a tuple upon creation.

    Raises:
        InvalidDirectiveShape: If the names are not a valid identifier or a non-empty list of valid identifiers
    """
    intent: Intent
    visibility: Visibility
    names: Tuple[str, ...]
    location: Optional[SourceLocation] = None

    def __post_init__(self):
        object.__setattr__(self, 'names', parse_names(self.names, self.location))

    def resolve(self) -> Tuple[ResolvedKey, ...]:
        return tuple(ResolvedKey(self.intent, self.visibility, name, self.location) for name in self.names)
