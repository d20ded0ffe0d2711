"""
Loading of generation manifests.

A manifest is a JSON file that describes one or more compilation units, i.e. generated modules, along with the host
binding and layout options. Example::

    {
        "host": {"module": "myapp.live.state"},
        "docstrings": true,
        "units": [
            {
                "output": "myapp/live/_assigns.py",
                "doc": "State wrappers for the dashboard view.",
                "directives": [
                    {"assign_private": ["foo", "bar", "baz", "just_mounted?"]},
                    {"update_private": "bar"}
                ]
            }
        ]
    }

Paths are relative to the directory containing the manifest. Each directive is an object with a single key, which is
the name of a declaration form (``assign``, ``assign_private``, ``assign_lazy``, ``assign_lazy_private``, ``update``,
``update_private``, or one of their aliases ``defassign``, ``defassignp``, ``defassign_new``, ``defassign_newp``,
``defupdate``, ``defupdatep``).
"""

import json
import logging
import os

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import jsonschema
import jsonschema.exceptions

import atmfjstc.lib.assigns_codegen.schema as SH

from atmfjstc.lib.assigns_codegen.codegen import CodegenContext
from atmfjstc.lib.assigns_codegen.directives import Directive
from atmfjstc.lib.assigns_codegen.errors import ManifestError, InvalidHostApiError
from atmfjstc.lib.assigns_codegen.host import HostApi
from atmfjstc.lib.assigns_codegen.location import SourceLocation
from atmfjstc.lib.assigns_codegen.registry import DECLARATION_FORMS


LOG = logging.getLogger(__name__)


FORM_ALIASES = {
    'defassign': 'assign',
    'defassignp': 'assign_private',
    'defassign_new': 'assign_lazy',
    'defassign_newp': 'assign_lazy_private',
    'defupdate': 'update',
    'defupdatep': 'update_private',
}


DEFAULT_WIDTH = 100
DEFAULT_INDENT = 4
MIN_WIDTH = 40


_HOST_OPTIONAL_PROPS = dict(
    set_field=SH.non_empty_str(),
    set_field_if_absent=SH.non_empty_str(),
    update_field=SH.non_empty_str(),
    container_param=SH.non_empty_str(),
)

HOST_SCHEMA = SH.obj(dict(module=SH.non_empty_str()), optional=_HOST_OPTIONAL_PROPS)

HOST_OVERRIDE_SCHEMA = SH.obj(optional=dict(module=SH.non_empty_str(), **_HOST_OPTIONAL_PROPS))

DIRECTIVE_SCHEMA = SH.single_key_obj([*DECLARATION_FORMS.keys(), *FORM_ALIASES.keys()])

UNIT_SCHEMA = SH.obj(
    dict(
        output=SH.non_empty_str(),
        directives=SH.array(DIRECTIVE_SCHEMA),
    ),
    optional=dict(
        doc=SH.string(),
        host=HOST_OVERRIDE_SCHEMA,
    )
)

MANIFEST_SCHEMA = SH.obj(
    dict(
        host=HOST_SCHEMA,
        units=SH.array(UNIT_SCHEMA, min_length=1),
    ),
    optional={
        '$schema': SH.string(),
        'width': SH.integer(min=MIN_WIDTH, default=DEFAULT_WIDTH),
        'indent': SH.integer(min=1, max=8, default=DEFAULT_INDENT),
        'docstrings': SH.boolean(default=False),
    }
)


@dataclass(frozen=True)
class ManifestUnit:
    """
    One compilation unit: the directives for a single generated module.
    """
    output: Path
    directives: Tuple[Directive, ...]
    host: HostApi
    doc: Optional[str] = None
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Manifest:
    path: Path
    units: Tuple[ManifestUnit, ...]
    width: int = DEFAULT_WIDTH
    indent: int = DEFAULT_INDENT
    docstrings: bool = False

    def codegen_context(self) -> CodegenContext:
        return CodegenContext(width=self.width, indent=self.indent)


def load_manifest(path: Union[str, Path]) -> Manifest:
    """
    Reads, validates and parses a manifest file.

    Raises:
        ManifestError: If the file cannot be read, is not valid JSON, does not match the manifest schema, or two
            units have the same output file
        InvalidHostApiError: If a host binding contains invalid names
        InvalidDirectiveShape: If a directive's names are not a valid identifier or a non-empty list of identifiers
    """
    path = Path(path)
    location = SourceLocation(str(path))

    try:
        text = path.read_text(encoding='utf-8')
    except FileNotFoundError as e:
        raise ManifestError("Manifest file not found", location) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Could not read manifest: {e}", location) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON: {e.msg}", SourceLocation(str(path), line=e.lineno)) from e

    return parse_manifest(data, path)


def parse_manifest(data: Any, path: Union[str, Path]) -> Manifest:
    """
    Parses manifest data that has already been decoded from JSON.

    The `path` is used for resolving the units' output paths and for reporting error locations.
    """
    path = Path(path)
    location = SourceLocation(str(path))

    _validate(data, location)

    default_host = _parse_host(data['host'], location.child('host'))

    units = tuple(
        _parse_unit(raw_unit, path.parent, default_host, location.child('units').child(index))
        for index, raw_unit in enumerate(data['units'])
    )

    _check_unique_outputs(units)

    LOG.debug("Loaded manifest %s with %d unit(s)", path, len(units))

    return Manifest(
        path=path,
        units=units,
        width=data.get('width', DEFAULT_WIDTH),
        indent=data.get('indent', DEFAULT_INDENT),
        docstrings=data.get('docstrings', False),
    )


def _validate(data: Any, location: SourceLocation):
    validator = jsonschema.Draft7Validator(MANIFEST_SCHEMA)

    error = jsonschema.exceptions.best_match(validator.iter_errors(data))
    if error is None:
        return

    error_location = location
    for part in error.absolute_path:
        error_location = error_location.child(part)

    raise ManifestError(f"Invalid manifest: {error.message}", error_location)


def _parse_host(raw_host: dict, location: SourceLocation, base: Optional[HostApi] = None) -> HostApi:
    try:
        return HostApi(**raw_host) if base is None else replace(base, **raw_host)
    except InvalidHostApiError as e:
        raise InvalidHostApiError(e.str_without_context(), location) from None


def _parse_unit(raw_unit: dict, base_dir: Path, default_host: HostApi, location: SourceLocation) -> ManifestUnit:
    host = default_host
    if 'host' in raw_unit:
        host = _parse_host(raw_unit['host'], location.child('host'), base=default_host)

    directives_location = location.child('directives')

    return ManifestUnit(
        output=base_dir / raw_unit['output'],
        directives=tuple(
            _parse_directive(raw_directive, directives_location.child(index))
            for index, raw_directive in enumerate(raw_unit['directives'])
        ),
        host=host,
        doc=raw_unit.get('doc'),
        location=location,
    )


def _check_unique_outputs(units: Tuple[ManifestUnit, ...]):
    seen: Dict[Path, ManifestUnit] = dict()

    for unit in units:
        output = Path(os.path.normpath(unit.output.absolute()))

        original = seen.get(output)
        if original is not None:
            raise ManifestError(
                f"Output '{unit.output}' is already generated by the unit at {original.location.pointer}",
                unit.location.child('output')
            )

        seen[output] = unit


def _parse_directive(raw_directive: dict, location: SourceLocation) -> Directive:
    (form, names), = raw_directive.items()

    intent, visibility = DECLARATION_FORMS[FORM_ALIASES.get(form, form)]

    return Directive(intent, visibility, names, location)
