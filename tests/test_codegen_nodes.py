import unittest

from atmfjstc.lib.assigns_codegen.codegen import CodegenContext, Atom, NullNode, Sequence, Section, ItemsList, Block, \
    ChainedBlocks, ReflowableText, WrapText


def _render(node, width=80, indent=4):
    return list(node.render(CodegenContext(width=width, indent=indent)))


class CodegenContextTest(unittest.TestCase):
    def test_derive(self):
        context = CodegenContext(width=80, indent=2)

        self.assertEqual(context.derive(sub_one_indent=True), CodegenContext(width=78, indent=2))
        self.assertEqual(context.derive(add_width=5, sub_width=3).width, 82)
        self.assertEqual(context.derive(width=40, oneliner=True), CodegenContext(width=40, indent=2, oneliner=True))

    def test_derive_does_not_modify(self):
        context = CodegenContext()
        context.derive(width=10)

        self.assertEqual(context.width, 100)

    def test_invalid_indent(self):
        with self.assertRaises(ValueError):
            CodegenContext(indent=0)


class AtomTest(unittest.TestCase):
    def test_render(self):
        self.assertEqual(_render(Atom('foo')), ['foo'])

    def test_multiline_rejected(self):
        with self.assertRaises(ValueError):
            Atom('foo\nbar')

    def test_alter(self):
        self.assertEqual(Atom('a').alter(content='b'), Atom('b'))


class SequenceTest(unittest.TestCase):
    def test_items_margin(self):
        self.assertEqual(_render(Sequence((Atom('a'), Atom('b')), items_margin=2)), ['a', '', '', 'b'])

    def test_section_margins(self):
        node = Sequence((Atom('a'), Section(Atom('b'), margin=1), Atom('c')))

        self.assertEqual(_render(node), ['a', '', 'b', '', 'c'])

    def test_larger_margin_wins(self):
        node = Sequence((Section(Atom('a'), margin_bottom=1), Section(Atom('b'), margin_top=3)))

        self.assertEqual(_render(node), ['a', '', '', '', 'b'])

    def test_empty_items_skipped(self):
        node = Sequence((NullNode(), Atom('a'), NullNode(), Atom('b'), NullNode()), items_margin=2)

        self.assertEqual(_render(node), ['a', '', '', 'b'])

    def test_rejects_non_nodes(self):
        with self.assertRaises(TypeError):
            Sequence((Atom('a'), 'b'))


class ItemsListTest(unittest.TestCase):
    ITEMS = [Atom('alpha'), Atom('beta'), Atom('gamma')]

    def test_single_line(self):
        self.assertEqual(_render(ItemsList(self.ITEMS, joiner=', ')), ['alpha, beta, gamma'])

    def test_horizontal_wrap(self):
        self.assertEqual(_render(ItemsList(self.ITEMS, joiner=', '), width=12), ['alpha, beta,', 'gamma'])

    def test_vertical(self):
        self.assertEqual(
            _render(ItemsList(self.ITEMS, joiner=', ', allow_horiz=False)),
            ['alpha,', 'beta,', 'gamma']
        )

    def test_trailing_comma(self):
        self.assertEqual(
            _render(ItemsList(self.ITEMS, joiner=', ', allow_horiz=False, trailing_comma=True)),
            ['alpha,', 'beta,', 'gamma,']
        )

    def test_empty_items_get_no_joiner(self):
        self.assertEqual(_render(ItemsList([Atom('a'), NullNode(), Atom('b')], joiner=', ')), ['a, b'])
        self.assertEqual(_render(ItemsList([Atom('a'), NullNode()], joiner=', ')), ['a'])


class BlockTest(unittest.TestCase):
    def test_oneliner(self):
        node = Block(ItemsList([Atom('a'), Atom('b')], joiner=', '), head='f(', tail=')')

        self.assertEqual(_render(node), ['f(a, b)'])

    def test_multiline(self):
        node = Block(ItemsList([Atom('a'), Atom('b')], joiner=', '), head='f(', tail=')')

        self.assertEqual(_render(node, width=5), ['f(', '    a,', '    b', ')'])

    def test_empty_content(self):
        self.assertEqual(_render(Block(ItemsList([]), head='f(', tail=')')), ['f()'])

    def test_oneliner_disallowed(self):
        node = Block(Atom('pass'), head='if x:', allow_oneliner=False)

        self.assertEqual(_render(node, indent=2), ['if x:', '  pass'])

    def test_blank_lines_not_indented(self):
        node = Block(Sequence((Atom('a'), Atom('b')), items_margin=1), allow_oneliner=False)

        self.assertEqual(_render(node), ['', '    a', '', '    b'])

    def test_multiline_head_rejected(self):
        with self.assertRaises(ValueError):
            Block(NullNode(), head='a\nb')


class ChainedBlocksTest(unittest.TestCase):
    def _function(self, name, params):
        return ChainedBlocks((
            Block(ItemsList([Atom(param) for param in params], joiner=', '), head=f'def {name}('),
            Atom('):'),
            Block(Atom('return x'), allow_oneliner=False),
        ))

    def test_short(self):
        self.assertEqual(_render(self._function('f', ['x'])), ['def f(x):', '    return x'])

    def test_long_signature(self):
        self.assertEqual(
            _render(self._function('some_long_function_name', ['x', 'y']), width=30),
            ['def some_long_function_name(', '    x, y', '):', '    return x']
        )

    def test_rejects_other_nodes(self):
        with self.assertRaises(TypeError):
            ChainedBlocks((Sequence(()),))


class TextTest(unittest.TestCase):
    def test_reflow(self):
        self.assertEqual(_render(ReflowableText("aaa bbb ccc ddd"), width=10), ['aaa bbb', 'ccc ddd'])

    def test_paragraphs(self):
        self.assertEqual(_render(ReflowableText("one\ntwo\n\nthree")), ['one two', '', 'three'])

    def test_dedent(self):
        text = """
            First line
            continues here.
        """

        self.assertEqual(_render(ReflowableText(text)), ['First line continues here.'])

    def test_wrap_as_comment(self):
        self.assertEqual(
            _render(WrapText(ReflowableText("aaa bbb ccc"), indent='# '), width=9),
            ['# aaa bbb', '# ccc']
        )

    def test_wrap_as_docstring(self):
        self.assertEqual(
            _render(WrapText(ReflowableText("Hello"), head='"""', tail='"""')),
            ['"""', 'Hello', '"""']
        )

    def test_wrap_empty(self):
        self.assertEqual(_render(WrapText(ReflowableText(''), head='"""', tail='"""')), [])
