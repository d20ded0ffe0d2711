"""
Collection and resolution of the directives for one compilation unit (i.e. one generated module).

Typical use::

    registry = DirectiveRegistry(HostApi('myapp.state'))

    registry.assign_private(['foo', 'bar', 'baz', 'just_mounted?'])
    registry.update_private('bar')

    functions = registry.finalize()

Each declaration form accepts a single name or a list of names. Names may end in a single ``?`` to mark boolean-style
fields: the ``?`` is dropped from the wrapper's name but kept in the storage key.
"""

import logging

from typing import Dict, Iterable, List, Optional, Tuple

from atmfjstc.lib.assigns_codegen.directives import Directive, Intent, Visibility, ResolvedKey, RawNames
from atmfjstc.lib.assigns_codegen.emitter import GeneratedFunction, emit_functions
from atmfjstc.lib.assigns_codegen.errors import DuplicateGeneratedName, RegistryClosedError
from atmfjstc.lib.assigns_codegen.host import HostApi
from atmfjstc.lib.assigns_codegen.location import SourceLocation, caller_location


LOG = logging.getLogger(__name__)


DECLARATION_FORMS: Dict[str, Tuple[Intent, Visibility]] = {
    'assign': (Intent.ASSIGN, Visibility.PUBLIC),
    'assign_private': (Intent.ASSIGN, Visibility.PRIVATE),
    'assign_lazy': (Intent.ASSIGN_LAZY, Visibility.PUBLIC),
    'assign_lazy_private': (Intent.ASSIGN_LAZY, Visibility.PRIVATE),
    'update': (Intent.UPDATE, Visibility.PUBLIC),
    'update_private': (Intent.UPDATE, Visibility.PRIVATE),
}
"""The six declaration forms, by name, with the intent and visibility each one stands for."""


def resolve_directives(directives: Iterable[Directive]) -> Tuple[ResolvedKey, ...]:
    """
    Flattens directives into resolved keys, in declaration order (and, within a directive, in the order the names were
    listed).

    Raises:
        DuplicateGeneratedName: If two keys would produce a function with the same name
    """
    keys = tuple(key for directive in directives for key in directive.resolve())

    _check_unique_function_names(keys)

    return keys


def _check_unique_function_names(keys: Iterable[ResolvedKey]):
    seen: Dict[str, ResolvedKey] = dict()

    for key in keys:
        original = seen.get(key.function_name)
        if original is not None:
            raise DuplicateGeneratedName(key.function_name, key.location, original.location)

        seen[key.function_name] = key


class DirectiveRegistry:
    """
    Collects the directives for one compilation unit, then emits the corresponding wrapper functions in one go.

    The registry is single-use: once `finalize()` has been called, it no longer accepts declarations.
    """

    host: HostApi

    _directives: List[Directive]
    _finalized: bool

    def __init__(self, host: HostApi):
        self.host = host
        self._directives = []
        self._finalized = False

    @property
    def directives(self) -> Tuple[Directive, ...]:
        return tuple(self._directives)

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    def assign(self, names: RawNames) -> Directive:
        """
        Requests a public ``assign_<name>(container, <name>)`` wrapper for each name.
        """
        return self._add(Directive(Intent.ASSIGN, Visibility.PUBLIC, names, caller_location()))

    def assign_private(self, names: RawNames) -> Directive:
        """
        Same as `assign`, but the wrappers are private.
        """
        return self._add(Directive(Intent.ASSIGN, Visibility.PRIVATE, names, caller_location()))

    def assign_lazy(self, names: RawNames) -> Directive:
        """
        Requests a public ``assign_new_<name>(container, producer)`` wrapper for each name.
        """
        return self._add(Directive(Intent.ASSIGN_LAZY, Visibility.PUBLIC, names, caller_location()))

    def assign_lazy_private(self, names: RawNames) -> Directive:
        """
        Same as `assign_lazy`, but the wrappers are private.
        """
        return self._add(Directive(Intent.ASSIGN_LAZY, Visibility.PRIVATE, names, caller_location()))

    def update(self, names: RawNames) -> Directive:
        """
        Requests a public ``update_<name>(container, updater)`` wrapper for each name.
        """
        return self._add(Directive(Intent.UPDATE, Visibility.PUBLIC, names, caller_location()))

    def update_private(self, names: RawNames) -> Directive:
        """
        Same as `update`, but the wrappers are private.
        """
        return self._add(Directive(Intent.UPDATE, Visibility.PRIVATE, names, caller_location()))

    def declare(
        self, intent: Intent, visibility: Visibility, names: RawNames, location: Optional[SourceLocation] = None
    ) -> Directive:
        """
        Generic form of the declaration methods above. If no location is given, the caller's file and line are used.
        """
        return self._add(Directive(intent, visibility, names, location or caller_location()))

    def extend(self, directives: Iterable[Directive]) -> 'DirectiveRegistry':
        """
        Adds already constructed directives (e.g. read from a manifest), in order.
        """
        for directive in directives:
            self._add(directive)

        return self

    def resolve(self) -> Tuple[ResolvedKey, ...]:
        """
        Resolves the directives collected so far. This has no side effects and can be called any number of times.
        """
        return resolve_directives(self._directives)

    def finalize(self) -> Tuple[GeneratedFunction, ...]:
        """
        Emits one wrapper function per resolved key and closes the registry.

        Raises:
            DuplicateGeneratedName: If two keys would produce a function with the same name
            InvalidHostApiError: If a wrapper would have the same name as a host operation it calls
            RegistryClosedError: If the registry was already finalized
        """
        self._check_open()

        keys = self.resolve()
        functions = emit_functions(keys, self.host)

        self._finalized = True
        self._directives = []

        LOG.debug("Emitted %d wrapper function(s)", len(functions))

        return functions

    def _add(self, directive: Directive) -> Directive:
        self._check_open()

        self._directives.append(directive)
        LOG.debug("Declared %s %s for %s at %s", directive.visibility.name, directive.intent.name,
                  ', '.join(directive.names), directive.location)

        return directive

    def _check_open(self):
        if self._finalized:
            raise RegistryClosedError()
