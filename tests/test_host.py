import unittest

from atmfjstc.lib.assigns_codegen import dict_host
from atmfjstc.lib.assigns_codegen.directives import Intent
from atmfjstc.lib.assigns_codegen.errors import InvalidHostApiError
from atmfjstc.lib.assigns_codegen.host import HostApi, is_valid_module_path


class HostApiTest(unittest.TestCase):
    def test_defaults(self):
        host = HostApi('myapp.state')

        self.assertEqual(host.operation_for(Intent.ASSIGN), 'set_field')
        self.assertEqual(host.operation_for(Intent.ASSIGN_LAZY), 'set_field_if_absent')
        self.assertEqual(host.operation_for(Intent.UPDATE), 'update_field')
        self.assertEqual(host.container_param, 'container')

    def test_invalid_module(self):
        for module in ['', 'my app', 'myapp.', 'myapp..state', 'class.state', 'myapp-state']:
            with self.subTest(module=module):
                with self.assertRaises(InvalidHostApiError):
                    HostApi(module)

    def test_valid_module_paths(self):
        for module in ['state', 'myapp.live.state', '.state', '..state', '.']:
            with self.subTest(module=module):
                self.assertTrue(is_valid_module_path(module))

    def test_invalid_operation_name(self):
        with self.assertRaisesRegex(InvalidHostApiError, 'set_field'):
            HostApi('myapp', set_field='set-field')

    def test_keyword_operation_name(self):
        with self.assertRaises(InvalidHostApiError):
            HostApi('myapp', update_field='lambda')

    def test_container_param_clash(self):
        for name in ['producer', 'updater']:
            with self.subTest(name=name):
                with self.assertRaises(InvalidHostApiError):
                    HostApi('myapp', container_param=name)

    def test_operation_named_like_wrapper_param(self):
        for attr in ['set_field', 'set_field_if_absent', 'update_field']:
            for name in ['producer', 'updater']:
                with self.subTest(attr=attr, name=name):
                    with self.assertRaisesRegex(InvalidHostApiError, attr):
                        HostApi('myapp', **{attr: name})

    def test_container_param_shadows_operation(self):
        for name in ['set_field', 'set_field_if_absent', 'update_field']:
            with self.subTest(name=name):
                with self.assertRaisesRegex(InvalidHostApiError, 'shadow'):
                    HostApi('myapp', container_param=name)

    def test_container_param_shadows_renamed_operation(self):
        with self.assertRaises(InvalidHostApiError):
            HostApi('myapp', set_field='put', container_param='put')

    def test_operations_may_share_a_name(self):
        host = HostApi('myapp', update_field='set_field')

        self.assertEqual(host.operation_names, frozenset(['set_field', 'set_field_if_absent']))


class DictHostTest(unittest.TestCase):
    def test_set_field(self):
        container = {'a': 1}

        self.assertEqual(dict_host.set_field(container, 'b', 2), {'a': 1, 'b': 2})
        self.assertEqual(container, {'a': 1})

    def test_set_field_if_absent(self):
        self.assertEqual(dict_host.set_field_if_absent({}, 'a', lambda: 5), {'a': 5})

    def test_set_field_if_absent_skips_producer(self):
        def producer():
            raise AssertionError("Producer should not be called")

        self.assertEqual(dict_host.set_field_if_absent({'a': 1}, 'a', producer), {'a': 1})

    def test_update_field(self):
        container = {'a': 1}

        self.assertEqual(dict_host.update_field(container, 'a', lambda v: v + 1), {'a': 2})
        self.assertEqual(container, {'a': 1})

    def test_update_missing_field(self):
        with self.assertRaises(KeyError):
            dict_host.update_field({}, 'a', lambda v: v)
