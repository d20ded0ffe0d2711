"""
High-level entry points tying together directive resolution, emission and rendering.
"""

import os

from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Iterable, Optional, Tuple

from atmfjstc.lib.assigns_codegen.codegen import CodegenContext
from atmfjstc.lib.assigns_codegen.directives import Directive
from atmfjstc.lib.assigns_codegen.host import HostApi
from atmfjstc.lib.assigns_codegen.manifest import Manifest, ManifestUnit
from atmfjstc.lib.assigns_codegen.registry import DirectiveRegistry
from atmfjstc.lib.assigns_codegen.render import render_module


@dataclass(frozen=True)
class GeneratedModule:
    path: Path
    source: str


def generate_module_source(
    directives: Iterable[Directive], host: HostApi, context: Optional[CodegenContext] = None,
    doc: Optional[str] = None, source: Optional[str] = None, docstrings: bool = False
) -> str:
    """
    Resolves and emits a set of directives, and renders the result as a module.

    See `render_module` for the meaning of the remaining parameters.
    """
    functions = DirectiveRegistry(host).extend(directives).finalize()

    return render_module(functions, host, context=context, doc=doc, source=source, docstrings=docstrings)


def generate_unit(
    manifest: Manifest, unit: ManifestUnit, context: Optional[CodegenContext] = None
) -> GeneratedModule:
    """
    Generates the module for one unit of a manifest. The layout options of the manifest apply unless a `context` is
    given explicitly.
    """
    return GeneratedModule(
        path=unit.output,
        source=generate_module_source(
            unit.directives, unit.host,
            context=context or manifest.codegen_context(),
            doc=unit.doc,
            source=_relative_source_name(manifest.path, unit.output),
            docstrings=manifest.docstrings,
        ),
    )


def generate_manifest(manifest: Manifest, context: Optional[CodegenContext] = None) -> Tuple[GeneratedModule, ...]:
    return tuple(generate_unit(manifest, unit, context) for unit in manifest.units)


def _relative_source_name(manifest_path: Path, output_path: Path) -> str:
    # Relative to the output, so that the header does not depend on where the project is checked out
    try:
        return PurePath(os.path.relpath(manifest_path, output_path.parent)).as_posix()
    except ValueError:
        return manifest_path.name
