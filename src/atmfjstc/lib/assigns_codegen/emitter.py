import keyword

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from atmfjstc.lib.assigns_codegen.directives import Intent, Visibility, ResolvedKey
from atmfjstc.lib.assigns_codegen.errors import InvalidHostApiError
from atmfjstc.lib.assigns_codegen.host import HostApi, LAZY_PARAM, UPDATE_PARAM
from atmfjstc.lib.assigns_codegen.location import SourceLocation


@dataclass(frozen=True)
class GeneratedFunction:
    """
    A wrapper function, ready to be rendered.

    The body of every wrapper is a single call, ``return <host_operation>(<container>, <key>, <value parameter>)``.

    Attributes:
        function_name: The name of the wrapper, e.g. ``assign_connected``. This does not include the underscore that
            marks private functions in Python (see `python_name`).
        visibility: Whether the wrapper is part of the generated module's public interface
        intent: The intent of the directive that requested the wrapper
        key: The storage key, i.e. the original name, including any trailing ``?``
        parameter_names: The container parameter, followed by the value/producer/updater parameter
        host_operation: The name of the host function called by the wrapper
        location: Where the requesting directive was declared
    """
    function_name: str
    visibility: Visibility
    intent: Intent
    key: str
    parameter_names: Tuple[str, str]
    host_operation: str
    location: Optional[SourceLocation] = None

    @property
    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC

    @property
    def python_name(self) -> str:
        return self.function_name if self.is_public else '_' + self.function_name

    @property
    def call_arguments(self) -> Tuple[str, str, str]:
        """
        The argument expressions of the host call, as Python source fragments.
        """
        container_param, value_param = self.parameter_names

        return container_param, repr(self.key), value_param


def emit_function(key: ResolvedKey, host: HostApi) -> GeneratedFunction:
    operation = host.operation_for(key.intent)

    if key.intent == Intent.ASSIGN:
        value_param = _safe_param_name(key.sanitized_name, {host.container_param, operation})
    elif key.intent == Intent.ASSIGN_LAZY:
        value_param = LAZY_PARAM
    else:
        value_param = UPDATE_PARAM

    return GeneratedFunction(
        function_name=key.function_name,
        visibility=key.visibility,
        intent=key.intent,
        key=key.name,
        parameter_names=(host.container_param, value_param),
        host_operation=operation,
        location=key.location,
    )


def emit_functions(keys: Iterable[ResolvedKey], host: HostApi) -> Tuple[GeneratedFunction, ...]:
    """
    Emits the wrappers for a unit's keys, in order.

    Raises:
        InvalidHostApiError: If a wrapper would have the same name as a host operation it imports
    """
    functions = tuple(emit_function(key, host) for key in keys)

    _check_no_shadowed_operations(functions)

    return functions


def _check_no_shadowed_operations(functions: Tuple[GeneratedFunction, ...]):
    imported = set(function.host_operation for function in functions)

    for function in functions:
        if function.python_name in imported:
            raise InvalidHostApiError(
                f"Wrapper '{function.python_name}' would replace the host operation of the same name",
                function.location
            )


def _safe_param_name(name: str, taken: set) -> str:
    # The parameter must not shadow the host operation called in the body, nor the container parameter
    while keyword.iskeyword(name) or (name in taken):
        name += '_'

    return name
