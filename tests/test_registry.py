import inspect
import unittest

from pathlib import Path

from atmfjstc.lib.assigns_codegen.directives import Intent, Visibility, Directive
from atmfjstc.lib.assigns_codegen.errors import DuplicateGeneratedName, RegistryClosedError, InvalidDirectiveShape, \
    InvalidHostApiError
from atmfjstc.lib.assigns_codegen.host import HostApi
from atmfjstc.lib.assigns_codegen.location import SourceLocation
from atmfjstc.lib.assigns_codegen.registry import DirectiveRegistry, DECLARATION_FORMS, resolve_directives


HOST = HostApi('myapp.state')


def _summary(functions):
    return [(f.python_name, f.key, f.host_operation, f.parameter_names) for f in functions]


class DirectiveRegistryTest(unittest.TestCase):
    def test_dashboard_example(self):
        registry = DirectiveRegistry(HOST)

        registry.assign_private(['foo', 'bar', 'baz', 'just_mounted?'])
        registry.update_private('bar')

        functions = registry.finalize()

        self.assertEqual(
            [(f.function_name, f.key, f.visibility) for f in functions],
            [
                ('assign_foo', 'foo', Visibility.PRIVATE),
                ('assign_bar', 'bar', Visibility.PRIVATE),
                ('assign_baz', 'baz', Visibility.PRIVATE),
                ('assign_just_mounted', 'just_mounted?', Visibility.PRIVATE),
                ('update_bar', 'bar', Visibility.PRIVATE),
            ]
        )

    def test_all_forms(self):
        registry = DirectiveRegistry(HOST)

        registry.assign('a')
        registry.assign_private('b')
        registry.assign_lazy('c')
        registry.assign_lazy_private('d')
        registry.update('e')
        registry.update_private('f')

        self.assertEqual(
            _summary(registry.finalize()),
            [
                ('assign_a', 'a', 'set_field', ('container', 'a')),
                ('_assign_b', 'b', 'set_field', ('container', 'b')),
                ('assign_new_c', 'c', 'set_field_if_absent', ('container', 'producer')),
                ('_assign_new_d', 'd', 'set_field_if_absent', ('container', 'producer')),
                ('update_e', 'e', 'update_field', ('container', 'updater')),
                ('_update_f', 'f', 'update_field', ('container', 'updater')),
            ]
        )

    def test_list_flattens_in_order(self):
        registry = DirectiveRegistry(HOST)
        registry.assign(['a', 'b', 'c'])

        keys = registry.resolve()

        self.assertEqual([key.name for key in keys], ['a', 'b', 'c'])

    def test_declaration_order_across_directives(self):
        registry = DirectiveRegistry(HOST)
        registry.update('z')
        registry.assign(['y', 'x'])
        registry.assign_lazy('w')

        self.assertEqual(
            [f.function_name for f in registry.finalize()],
            ['update_z', 'assign_y', 'assign_x', 'assign_new_w']
        )

    def test_assign_and_update_same_name_coexist(self):
        registry = DirectiveRegistry(HOST)
        registry.assign('foo')
        registry.update('foo')
        registry.assign_lazy('foo')

        self.assertEqual(
            [f.function_name for f in registry.finalize()],
            ['assign_foo', 'update_foo', 'assign_new_foo']
        )

    def test_duplicate_in_separate_directives(self):
        registry = DirectiveRegistry(HOST)

        first_line = inspect.currentframe().f_lineno + 1
        registry.assign('foo')
        registry.assign('foo')

        with self.assertRaises(DuplicateGeneratedName) as cm:
            registry.finalize()

        self.assertEqual(cm.exception.function_name, 'assign_foo')
        self.assertEqual(cm.exception.first_location.line, first_line)
        self.assertEqual(cm.exception.location.line, first_line + 1)
        self.assertIn("'assign_foo' would be generated more than once", str(cm.exception))

    def test_duplicate_within_one_list(self):
        registry = DirectiveRegistry(HOST)
        registry.update(['foo', 'bar', 'foo'])

        with self.assertRaises(DuplicateGeneratedName):
            registry.finalize()

    def test_duplicate_via_question_mark(self):
        registry = DirectiveRegistry(HOST)
        registry.assign(['ready', 'ready?'])

        with self.assertRaises(DuplicateGeneratedName) as cm:
            registry.finalize()

        self.assertEqual(cm.exception.function_name, 'assign_ready')

    def test_duplicate_across_visibilities(self):
        registry = DirectiveRegistry(HOST)
        registry.assign('foo')
        registry.assign_private('foo')

        with self.assertRaises(DuplicateGeneratedName):
            registry.finalize()

    def test_duplicate_across_intents(self):
        registry = DirectiveRegistry(HOST)
        registry.assign('new_foo')
        registry.assign_lazy('foo')

        with self.assertRaises(DuplicateGeneratedName) as cm:
            registry.finalize()

        self.assertEqual(cm.exception.function_name, 'assign_new_foo')

    def test_duplicate_leaves_registry_open(self):
        registry = DirectiveRegistry(HOST)
        registry.assign(['foo', 'foo'])

        with self.assertRaises(DuplicateGeneratedName):
            registry.finalize()

        self.assertFalse(registry.is_finalized)

    def test_invalid_shape(self):
        registry = DirectiveRegistry(HOST)

        with self.assertRaises(InvalidDirectiveShape):
            registry.assign([])

        self.assertEqual(registry.directives, ())

    def test_resolve_is_idempotent(self):
        registry = DirectiveRegistry(HOST)
        registry.assign_private(['foo', 'bar?'])
        registry.update('bar')

        self.assertEqual(registry.resolve(), registry.resolve())

    def test_same_directives_emit_same_functions(self):
        def build():
            registry = DirectiveRegistry(HOST)
            registry.assign_private(['foo', 'bar?'])
            registry.update('bar')
            return registry.finalize()

        self.assertEqual(_summary(build()), _summary(build()))

    def test_finalize_closes_registry(self):
        registry = DirectiveRegistry(HOST)
        registry.assign('foo')
        registry.finalize()

        self.assertTrue(registry.is_finalized)

        with self.assertRaises(RegistryClosedError):
            registry.assign('bar')
        with self.assertRaises(RegistryClosedError):
            registry.finalize()

    def test_empty_registry(self):
        self.assertEqual(DirectiveRegistry(HOST).finalize(), ())

    def test_location_is_caller(self):
        registry = DirectiveRegistry(HOST)

        line = inspect.currentframe().f_lineno + 1
        directive = registry.assign_lazy('foo')

        self.assertEqual(Path(directive.location.file).name, 'test_registry.py')
        self.assertEqual(directive.location.line, line)

    def test_declare_with_explicit_location(self):
        registry = DirectiveRegistry(HOST)
        location = SourceLocation('assigns.json', pointer='/units/0/directives/0')

        directive = registry.declare(Intent.UPDATE, Visibility.PRIVATE, 'bar', location)

        self.assertEqual(directive.location, location)
        self.assertEqual(registry.directives, (directive,))

    def test_declare_without_location(self):
        registry = DirectiveRegistry(HOST)

        line = inspect.currentframe().f_lineno + 1
        directive = registry.declare(Intent.ASSIGN, Visibility.PUBLIC, 'foo')

        self.assertEqual(directive.location.line, line)

    def test_extend(self):
        directives = [
            Directive(Intent.ASSIGN, Visibility.PUBLIC, ['a', 'b']),
            Directive(Intent.UPDATE, Visibility.PRIVATE, 'a'),
        ]

        registry = DirectiveRegistry(HOST).extend(directives)

        self.assertEqual(registry.directives, tuple(directives))
        self.assertEqual([f.python_name for f in registry.finalize()], ['assign_a', 'assign_b', '_update_a'])

    def test_wrapper_named_like_host_operation(self):
        registry = DirectiveRegistry(HostApi('myapp.state', set_field='assign_foo'))

        line = inspect.currentframe().f_lineno + 1
        registry.assign('foo')

        with self.assertRaisesRegex(InvalidHostApiError, "'assign_foo' would replace the host operation") as cm:
            registry.finalize()

        self.assertEqual(cm.exception.location.line, line)
        self.assertFalse(registry.is_finalized)

    def test_private_wrapper_named_like_host_operation(self):
        registry = DirectiveRegistry(HostApi('myapp.state', update_field='_update_bar'))
        registry.update_private('bar')

        with self.assertRaises(InvalidHostApiError):
            registry.finalize()

    def test_wrapper_named_like_unused_host_operation(self):
        registry = DirectiveRegistry(HostApi('myapp.state', update_field='assign_foo'))
        registry.assign('foo')

        function, = registry.finalize()

        self.assertEqual(function.host_operation, 'set_field')

    def test_update_bound_to_set_field(self):
        registry = DirectiveRegistry(HostApi('myapp.state', update_field='set_field'))
        registry.update('bar')

        function, = registry.finalize()

        self.assertEqual(function.host_operation, 'set_field')
        self.assertEqual(function.call_arguments, ('container', "'bar'", 'updater'))


class DeclarationFormsTest(unittest.TestCase):
    def test_forms_match_registry_methods(self):
        for form, (intent, visibility) in DECLARATION_FORMS.items():
            with self.subTest(form=form):
                registry = DirectiveRegistry(HOST)
                directive = getattr(registry, form)('foo')

                self.assertEqual((directive.intent, directive.visibility), (intent, visibility))


class ResolveDirectivesTest(unittest.TestCase):
    def test_flattening(self):
        keys = resolve_directives([
            Directive(Intent.ASSIGN, Visibility.PRIVATE, ['foo', 'just_mounted?']),
            Directive(Intent.UPDATE, Visibility.PRIVATE, 'foo'),
        ])

        self.assertEqual(
            [(key.function_name, key.name) for key in keys],
            [('assign_foo', 'foo'), ('assign_just_mounted', 'just_mounted?'), ('update_foo', 'foo')]
        )
