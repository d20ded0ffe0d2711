"""
Binding between the generated wrappers and the host framework's state-container API.

The generated code never implements any state handling itself. Each wrapper is a pass-through to one of three host
operations, which the generated module imports from the host module:

- ``set_field(container, key, value)``: sets `key` to `value`
- ``set_field_if_absent(container, key, producer)``: sets `key` to ``producer()``, only if `key` is not present yet
- ``update_field(container, key, updater)``: sets `key` to ``updater(<current value>)``

All three return the updated container. The actual function names can be configured, which also allows binding two
intents to the same host function (e.g. ``update_field='set_field'`` for hosts whose "set" operation detects updater
functions by itself).
"""

import keyword

from dataclasses import dataclass
from typing import FrozenSet

from atmfjstc.lib.assigns_codegen.directives import Intent
from atmfjstc.lib.assigns_codegen.errors import InvalidHostApiError


LAZY_PARAM = 'producer'
UPDATE_PARAM = 'updater'


@dataclass(frozen=True)
class HostApi:
    """
    Describes where the generated wrappers find the host operations, and what they call the container parameter.

    Attributes:
        module: The module to import the operations from. Can be relative (e.g. ``.state``) if the generated module
            lives inside a package.
        set_field: Name of the "set field" operation
        set_field_if_absent: Name of the "set field if absent" operation
        update_field: Name of the "update field via function" operation
        container_param: Name of the first parameter of every generated wrapper
    """
    module: str
    set_field: str = 'set_field'
    set_field_if_absent: str = 'set_field_if_absent'
    update_field: str = 'update_field'
    container_param: str = 'container'

    def __post_init__(self):
        if not is_valid_module_path(self.module):
            raise InvalidHostApiError(f"Invalid host module path: {self.module!r}")

        for attr in ('set_field', 'set_field_if_absent', 'update_field', 'container_param'):
            value = getattr(self, attr)
            if not is_plain_identifier(value):
                raise InvalidHostApiError(f"Invalid {attr} name: {value!r}")

        if self.container_param in (LAZY_PARAM, UPDATE_PARAM):
            raise InvalidHostApiError(
                f"The container parameter cannot be called {self.container_param!r}, as that name is used for the "
                f"second parameter of some wrappers"
            )

        for attr in ('set_field', 'set_field_if_absent', 'update_field'):
            value = getattr(self, attr)
            if value in (LAZY_PARAM, UPDATE_PARAM):
                raise InvalidHostApiError(
                    f"The {attr} operation cannot be called {value!r}, as that name is used for the second parameter "
                    f"of some wrappers"
                )

        if self.container_param in self.operation_names:
            raise InvalidHostApiError(
                f"The container parameter cannot be called {self.container_param!r}, as it would shadow the host "
                f"operation of the same name"
            )

    @property
    def operation_names(self) -> FrozenSet[str]:
        """
        The names the generated module imports from the host module.
        """
        return frozenset((self.set_field, self.set_field_if_absent, self.update_field))

    def operation_for(self, intent: Intent) -> str:
        """
        Returns the name of the host function that wrappers of the given intent delegate to.
        """
        if intent == Intent.ASSIGN:
            return self.set_field
        elif intent == Intent.ASSIGN_LAZY:
            return self.set_field_if_absent
        elif intent == Intent.UPDATE:
            return self.update_field
        else:
            raise ValueError(f"Unsupported intent: {intent}")


def is_plain_identifier(name: str) -> bool:
    return isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)


def is_valid_module_path(path: str) -> bool:
    if not isinstance(path, str):
        return False

    absolute_part = path.lstrip('.')
    if absolute_part == '':
        return path != ''

    return all(is_plain_identifier(part) for part in absolute_part.split('.'))
