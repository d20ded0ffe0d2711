"""
Layout nodes for assembling generated code as a tree instead of as a pile of strings.

Renderers build a tree out of the nodes here and call `render()` on the root. The nodes take care of indentation, of
choosing between one-line and multi-line layouts depending on the available width, and of blank-line margins between
sections, which frees the renderers from doing text processing themselves.

Example::

    ast = Block(
        ItemsList([Atom(repr(name)) for name in names], joiner=', '),
        head='__all__ = [', tail=']'
    )

    for line in ast.render(CodegenContext(width=60)):
        print(line)

renders as ``__all__ = ['assign_foo', 'assign_bar']`` when the names fit on one line, and as::

    __all__ = [
        'assign_foo', 'assign_bar', 'assign_baz', 'update_bar',
        'update_baz'
    ]

otherwise.

All nodes are immutable. Use `alter()` to obtain a modified copy.
"""

import itertools

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, replace
from textwrap import dedent, wrap
from typing import Iterable, Optional, Tuple

from atmfjstc.lib.assigns_codegen.codegen.context import CodegenContext
from atmfjstc.lib.assigns_codegen.codegen._util import check_single_line, iter_with_last, last_index_where, \
    split_paragraphs


class CodegenNode(metaclass=ABCMeta):
    """
    Base class for all layout nodes.
    """

    @abstractmethod
    def render(self, context: CodegenContext) -> Iterable[str]:
        """
        Renders this node within a given context (width, indent size etc.)

        The rendering is done line-by-line and, where possible, lazily.

        Returns:
            The generated text for this node, as a stream of lines. The lines are not newline-terminated.
        """
        raise NotImplementedError

    def alter(self, **changes) -> 'CodegenNode':
        """
        Returns a copy of this node with the specified fields modified.
        """
        return replace(self, **changes)


class PromptableNode(CodegenNode):
    """
    Base class for nodes that can render within a non-rectangular space.

    Such a space is a rectangle of `context.width` columns, except that some of the leftmost columns of the first line
    are reserved (the *prompt*, e.g. ``return `` before a call) and some of the rightmost columns of the last line are
    reserved too (the *tail*, e.g. the comma after an item in a list).
    """

    def render(self, context):
        return self.render_promptable(context, 0, 0)

    @abstractmethod
    def render_promptable(self, context: CodegenContext, prompt_width: int, tail_width: int) -> Iterable[str]:
        """
        The `render` method extended with the widths of the reserved prompt and tail areas.
        """
        raise NotImplementedError


def _as_children(node: CodegenNode, field_name: str, allowed_type=CodegenNode):
    children = tuple(getattr(node, field_name))

    for index, child in enumerate(children):
        if not isinstance(child, allowed_type):
            raise TypeError(
                f"{node.__class__.__name__}.{field_name}[{index}] must be a {_type_names(allowed_type)}, "
                f"got {child.__class__.__name__}"
            )

    object.__setattr__(node, field_name, children)


def _check_child(node: CodegenNode, field_name: str, allowed_type=CodegenNode):
    child = getattr(node, field_name)

    if not isinstance(child, allowed_type):
        raise TypeError(
            f"{node.__class__.__name__}.{field_name} must be a {_type_names(allowed_type)}, "
            f"got {child.__class__.__name__}"
        )


def _type_names(allowed_type) -> str:
    if isinstance(allowed_type, tuple):
        return ' or '.join(t.__name__ for t in allowed_type)

    return allowed_type.__name__


@dataclass(frozen=True)
class Atom(PromptableNode):
    """
    An unbreakable bit of text without newlines, rendered as-is wherever it appears.

    An empty `Atom` is not the same as a `NullNode`: it still counts as content for the blocks around it.
    """
    content: str

    def __post_init__(self):
        check_single_line(self.content, 'atom content')

    def render_promptable(self, _context, _prompt_width, _tail_width):
        yield self.content


@dataclass(frozen=True)
class NullNode(PromptableNode):
    """
    A node that renders nothing. Substitute a node with `NullNode` to make it disappear.
    """

    def render_promptable(self, _context, _prompt_width, _tail_width):
        yield from []


@dataclass(frozen=True)
class Sequence(CodegenNode):
    """
    A vertical sequence of sections rendered one after the other.

    Blank lines are inserted between sections according to their margins: an item with a top margin of *M* gets at
    least *M* blank lines between itself and the preceding item, and similarly for the bottom margin. Where two margins
    meet, the greater one applies. Margins default to `items_margin`; wrap an item in a `Section` to set its own.

    Margins do not apply at the edges of the sequence, nor around items that render no lines.
    """
    content: Tuple[CodegenNode, ...]
    items_margin: int = 0

    def __post_init__(self):
        _as_children(self, 'content')

    def render(self, context):
        filtered_sections = []

        for section in self.content:
            rendering = list(section.render(context))
            if len(rendering) == 0:
                continue

            margin_top, margin_bottom = \
                section.effective_margins if isinstance(section, Section) else (self.items_margin, self.items_margin)

            filtered_sections.append((rendering, margin_top, margin_bottom))

        prev_margin = None
        for rendering, margin_top, margin_bottom in filtered_sections:
            if prev_margin is not None:
                for _ in range(max(prev_margin, margin_top)):
                    yield ''

            yield from rendering

            prev_margin = margin_bottom


@dataclass(frozen=True)
class Section(CodegenNode):
    """
    Wraps another node to give it its own margins inside a `Sequence`.
    """
    content: CodegenNode
    margin: int = 0
    margin_top: Optional[int] = None
    margin_bottom: Optional[int] = None

    def __post_init__(self):
        _check_child(self, 'content')

    @property
    def effective_margins(self) -> Tuple[int, int]:
        return (
            self.margin if self.margin_top is None else self.margin_top,
            self.margin if self.margin_bottom is None else self.margin_bottom
        )

    def render(self, context):
        yield from self.content.render(context)


@dataclass(frozen=True)
class ItemsList(CodegenNode):
    """
    Renders list items, call arguments, function parameters etc.

    Depending on the available space and the nature of the items, one of two layouts is chosen (for joiner=", "):

    - Horizontal::

      item, item, item,
      item, item

    - Vertical::

      item,
      item,
      item

    If any of the items is multiline, only the vertical layout is available.
    """
    items: Tuple[PromptableNode, ...]
    joiner: str = ''
    allow_horiz: bool = True
    trailing_comma: bool = False

    def __post_init__(self):
        _as_children(self, 'items', PromptableNode)

    def render(self, context):
        item_renders = self._prepare_item_renders(context.derive(oneliner=True))

        if self.allow_horiz and all(len(item_render) <= 1 for item_render in item_renders):
            yield from self._render_horizontal(context, item_renders)
        else:
            yield from self._render_vertical(item_renders)

    def _split_joiner(self):
        joiner1 = self.joiner.rstrip()
        joiner2 = self.joiner[len(joiner1):]

        return joiner1, joiner2

    def _prepare_item_renders(self, context):
        # The order of these steps matters: items that turn out to be empty must not receive a joiner.
        joiner1, _ = self._split_joiner()

        item_renders = [list(item.render_promptable(context, 0, len(joiner1))) for item in self.items]

        if not self.trailing_comma:
            last_nonempty = last_index_where(item_renders, lambda r: len(r) > 0)
            if last_nonempty is not None:
                # The last item does not get a joiner, so it may use the tail space
                item_renders[last_nonempty] = list(self.items[last_nonempty].render(context))

        item_renders = [render for render in item_renders if len(render) > 0]

        for render in (item_renders if self.trailing_comma else item_renders[:-1]):
            render[-1] += joiner1

        return item_renders

    def _render_vertical(self, item_renders):
        for item in item_renders:
            yield from item

    def _render_horizontal(self, context, item_renders):
        _, joiner2 = self._split_joiner()

        buffer = ''

        for item_lines in item_renders:
            item = item_lines[0]

            candidate = buffer + ('' if buffer == '' else joiner2) + item
            if len(candidate) <= context.width:
                buffer = candidate
                continue

            if buffer != '':
                yield buffer

            buffer = item

        if buffer != '':
            yield buffer


@dataclass(frozen=True)
class Block(PromptableNode):
    """
    A block: content delimited by a head and a tail, and indented when it does not fit on one line.

    Useful for lists, calls, function definitions etc. (esp. in combination with `ItemsList`). For constructs made of
    several blocks, such as a function signature followed by its body, use `ChainedBlocks`.

    An empty tail is collapsed in the multi-line layout, which makes this suitable for indentation-only blocks as well.
    """
    content: CodegenNode
    head: str = ''
    tail: str = ''
    allow_oneliner: bool = True

    def __post_init__(self):
        _check_child(self, 'content')
        check_single_line(self.head, 'block head')
        check_single_line(self.tail, 'block tail')

    def render_promptable(self, context, prompt_width, tail_width):
        if self.allow_oneliner:
            render = self._try_render_oneliner(context, prompt_width, tail_width)
            if render is not None:
                yield render
                return

        yield self.head.rstrip()

        for line in self.content.render(context.derive(sub_one_indent=True, oneliner=False)):
            yield (' ' * context.indent + line) if line != '' else ''

        if self.tail.lstrip() != '':
            yield self.tail.lstrip()

    def _try_render_oneliner(self, context, prompt_width, tail_width):
        avail_width = context.width - prompt_width - tail_width - len(self.head) - len(self.tail)
        if avail_width < 0:
            return None

        content_render = list(self.content.render(context.derive(width=avail_width, oneliner=True)))
        if len(content_render) > 1:
            return None

        if (len(content_render) == 0) or (content_render[0] == ''):
            return self.head.rstrip() + self.tail.lstrip()

        if len(content_render[0]) > avail_width:
            return None

        return self.head + content_render[0] + self.tail


@dataclass(frozen=True)
class ChainedBlocks(PromptableNode):
    """
    Chains several blocks together, e.g. a function's parameter list and its body.

    The content is made of:

    - `Block` nodes, the blocks themselves
    - `Atom` nodes, merged with the tail of the previous block and the head of the next (and with adjacent atoms)
    - `NullNode` nodes, which are ignored
    - `ChainedBlocks` nodes, whose own content is spliced in place
    """
    content: Tuple[PromptableNode, ...]

    def __post_init__(self):
        _as_children(self, 'content', (Atom, Block, ChainedBlocks, NullNode))

    def render_promptable(self, context, prompt_width, tail_width):
        blocks, delimiters = self._consolidate()

        last_line = delimiters[0]
        effective_prompt_width = prompt_width

        for block, next_delim in zip(blocks, delimiters[1:]):
            effective_block = block.alter(head=last_line, tail=next_delim)

            for line, is_last in iter_with_last(
                effective_block.render_promptable(context, effective_prompt_width, tail_width)
            ):
                if not is_last:
                    yield line
                    effective_prompt_width = 0
                else:
                    last_line = line

        yield last_line

    def _consolidate(self):
        delimiters = []
        blocks = []

        for is_delim, parts in itertools.groupby(self._iter_raw_items(), lambda item: isinstance(item, str)):
            parts = list(parts)

            if is_delim:
                delimiters.append(''.join(parts))
            else:
                assert len(parts) == 1
                blocks.append(parts[0])

        assert len(delimiters) == len(blocks) + 1

        return blocks, delimiters

    def _iter_raw_items(self):
        def _iter_chain_content(content):
            for item in content:
                if isinstance(item, NullNode):
                    continue
                elif isinstance(item, Atom):
                    yield item.content
                elif isinstance(item, ChainedBlocks):
                    yield from _iter_chain_content(item.content)
                else:
                    yield item.head
                    yield item
                    yield item.tail

        yield ''
        yield from _iter_chain_content(self.content)
        yield ''


@dataclass(frozen=True)
class ReflowableText(CodegenNode):
    """
    A block of text reflowed so as to take up all the available width.

    The text is dedented first, so triple-quoted strings can be used directly. Lines separated by a single newline are
    merged into one paragraph; paragraphs are separated by blank lines. Leading and trailing blank lines are removed.
    """
    text: str

    def render(self, context):
        parts = split_paragraphs(dedent(self.text).strip("\n"))

        for i in range(0, len(parts), 2):
            if i > 0:
                for _ in range(parts[i - 1].count('\n') - 1):
                    yield ''

            yield from wrap(parts[i].rstrip(), width=context.width)


@dataclass(frozen=True)
class WrapText(CodegenNode):
    """
    Adds decorations around text content, usually to turn it into a comment or docstring.

    If the content is non-empty, the rendering looks like::

      <head>
      <indent>content line 1
      <indent>content line 2
      <tail>

    An empty `head` or `tail` produces no line. Empty content produces nothing at all.
    """
    content: CodegenNode
    indent: str = ''
    head: str = ''
    tail: str = ''

    def __post_init__(self):
        _check_child(self, 'content')

    def render(self, context):
        subcontext = context.derive(sub_width=len(self.indent))

        first = True

        for line in self.content.render(subcontext):
            if first and (self.head != ''):
                yield self.head

            yield (self.indent + line).rstrip()

            first = False

        if not first and (self.tail != ''):
            yield self.tail
