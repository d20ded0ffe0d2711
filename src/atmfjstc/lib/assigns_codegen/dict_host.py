"""
A reference implementation of the host state-container API over plain mappings.

Useful as the host for projects whose state is kept in dicts, and for exercising generated modules in tests. Use it
with ``HostApi('atmfjstc.lib.assigns_codegen.dict_host')``.

None of the operations mutate the container they are given; each returns a new `dict`.
"""

from typing import Any, Callable, Hashable, Mapping


def set_field(container: Mapping, key: Hashable, value: Any) -> dict:
    return {**container, key: value}


def set_field_if_absent(container: Mapping, key: Hashable, producer: Callable[[], Any]) -> dict:
    """
    Sets a field to the result of `producer`, unless the field is already present. The producer is not called at all
    in that case.
    """
    if key in container:
        return dict(container)

    return {**container, key: producer()}


def update_field(container: Mapping, key: Hashable, updater: Callable[[Any], Any]) -> dict:
    """
    Replaces the value of a field with the result of applying `updater` to it.

    Raises:
        KeyError: If the field is not present
    """
    return {**container, key: updater(container[key])}
