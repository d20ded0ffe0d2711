"""
A generator for the boilerplate wrapper functions around a state container's fields.

Rationale
---------

UI state is often kept in a container (a "socket", a dict, a store...) that the host framework manipulates through a
few generic operations: set a field, set a field only if it is not present yet, and update a field through a function.
Code that uses these directly is littered with string keys, e.g. ``set_field(state, 'connected?', True)``, and a typo
in a key only shows up at runtime.

Solution
--------

Declare the fields once, and generate one small, named wrapper per field and kind of operation::

    registry = DirectiveRegistry(HostApi('myapp.state'))

    registry.assign('name')                 # assign_name(container, name)
    registry.assign_lazy('items')           # assign_new_items(container, producer)
    registry.update_private(['counter'])    # _update_counter(container, updater)
    registry.assign_private('connected?')   # _assign_connected(container, connected), key 'connected?'

    print(render_module(registry.finalize(), registry.host))

The generated functions do nothing except call the host operation with the right key, so they are trivially
inlinable and carry no runtime dependency on this package. Normally, the directives live in a JSON manifest and the
modules are generated with the ``assigns-codegen`` command (see `atmfjstc.lib.assigns_codegen.manifest`).
"""

__version__ = '0.2.0'


from atmfjstc.lib.assigns_codegen.errors import AssignsCodegenError, InvalidDirectiveShape, DuplicateGeneratedName, \
    RegistryClosedError, InvalidHostApiError, ManifestError, GeneratedFileError
from atmfjstc.lib.assigns_codegen.location import SourceLocation
from atmfjstc.lib.assigns_codegen.directives import Intent, Visibility, Directive, ResolvedKey
from atmfjstc.lib.assigns_codegen.host import HostApi
from atmfjstc.lib.assigns_codegen.emitter import GeneratedFunction, emit_functions
from atmfjstc.lib.assigns_codegen.registry import DirectiveRegistry, resolve_directives
from atmfjstc.lib.assigns_codegen.render import render_module
from atmfjstc.lib.assigns_codegen.manifest import Manifest, ManifestUnit, load_manifest
from atmfjstc.lib.assigns_codegen.generate import GeneratedModule, generate_module_source, generate_manifest
