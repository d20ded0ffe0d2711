"""
Helpers for building JSON schemas in Python code.

Import this using, e.g.::

    import atmfjstc.lib.assigns_codegen.schema as SH

then define schemas using the helpers like e.g.::

    UNIT_SCHEMA = SH.obj(
        dict(output=SH.non_empty_str()),
        optional=dict(doc=SH.string()),
    )
"""

from typing import Any, Dict, Iterable, Optional


JSONSchema = Dict[str, Any]


def dict_no_nulls(**kwargs) -> dict:
    """
    Like ``dict(**kwargs)``, but leaves out the keys whose value is None.
    """
    return {key: value for key, value in kwargs.items() if value is not None}


def enu(values: Iterable[Any]) -> JSONSchema:
    return dict(enum=list(values))


def boolean(default: Optional[bool] = None) -> JSONSchema:
    return dict_no_nulls(type='boolean', default=default)


def integer(min: Optional[int] = None, max: Optional[int] = None, default: Optional[int] = None) -> JSONSchema:
    return dict_no_nulls(type='integer', minimum=min, maximum=max, default=default)


def string(min_len: Optional[int] = None) -> JSONSchema:
    return dict_no_nulls(type='string', minLength=min_len)


def non_empty_str() -> JSONSchema:
    return string(min_len=1)


def array(item_type: JSONSchema, min_length: Optional[int] = None) -> JSONSchema:
    return dict_no_nulls(
        type='array',
        items=item_type,
        minItems=min_length,
    )


def obj(props: Optional[Dict[str, JSONSchema]] = None, optional: Optional[Dict[str, JSONSchema]] = None) -> JSONSchema:
    """
    A closed object (no additional properties) with the given required and optional properties.
    """
    props = props or {}
    optional = optional or {}

    schema = dict(
        type='object',
        properties={**props, **optional},
        additionalProperties=False,
    )

    if len(props) > 0:
        schema['required'] = list(props.keys())

    return schema


def single_key_obj(keys: Iterable[str]) -> JSONSchema:
    """
    An object with exactly one property, whose name is one of `keys` (the value is not constrained).
    """
    return dict(
        type='object',
        minProperties=1,
        maxProperties=1,
        propertyNames=enu(keys),
    )
