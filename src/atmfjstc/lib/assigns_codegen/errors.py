from pathlib import PurePath
from typing import Any, Optional

from atmfjstc.lib.assigns_codegen.location import SourceLocation


class AssignsCodegenError(Exception):
    """
    Base class for all errors detected while generating wrapper functions.

    All of these are build-time errors: they stop the generation of the affected unit. Errors that pertain to a
    specific directive or manifest entry carry its location, which is shown as a prefix when `str()` is called on the
    error.
    """
    location: Optional[SourceLocation]

    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)

        self.location = location

    def __str__(self) -> str:
        return self.str_with_context()

    def str_with_context(self) -> str:
        return self.str_without_context() if self.location is None else f"{self.location}: {self.args[0]}"

    def str_without_context(self) -> str:
        return self.args[0]


class InvalidDirectiveShape(AssignsCodegenError):
    raw_names: Any

    def __init__(self, raw_names: Any, reason: str, location: Optional[SourceLocation] = None):
        super().__init__(f"Invalid directive names {raw_names!r}: {reason}", location)

        self.raw_names = raw_names


class DuplicateGeneratedName(AssignsCodegenError):
    function_name: str
    first_location: Optional[SourceLocation]

    def __init__(
        self, function_name: str, location: Optional[SourceLocation] = None,
        first_location: Optional[SourceLocation] = None
    ):
        super().__init__(
            f"Function '{function_name}' would be generated more than once" +
            (f" (first declared at {first_location})" if first_location is not None else ""),
            location
        )

        self.function_name = function_name
        self.first_location = first_location


class RegistryClosedError(AssignsCodegenError):
    def __init__(self, message: str = "The directive registry has already been finalized"):
        super().__init__(message)


class InvalidHostApiError(AssignsCodegenError):
    pass


class ManifestError(AssignsCodegenError):
    pass


class GeneratedFileError(AssignsCodegenError):
    path: PurePath

    def __init__(self, path: PurePath, message: Optional[str] = None):
        super().__init__(message or f"Could not write generated file '{path}'")

        self.path = path
