"""
Renders emitted wrapper functions as a complete Python module.

The module layout is::

    # <generated file notice>
    <module docstring, if any>

    from <host module> import <operations used>


    __all__ = [<public wrappers>]


    def assign_foo(container, foo):
        return set_field(container, 'foo', foo)

    ...
"""

from typing import Optional, Sequence as SequenceType

from atmfjstc.lib.assigns_codegen.codegen import CodegenContext, CodegenNode, Atom, NullNode, Sequence, Section, \
    ItemsList, Block, ChainedBlocks, ReflowableText, WrapText
from atmfjstc.lib.assigns_codegen.directives import Intent
from atmfjstc.lib.assigns_codegen.emitter import GeneratedFunction
from atmfjstc.lib.assigns_codegen.host import HostApi


GENERATOR_NAME = 'assigns-codegen'


_DOCSTRING_TEMPLATES = {
    Intent.ASSIGN: "Sets the {key!r} field of the container to the given value.",
    Intent.ASSIGN_LAZY: "Sets the {key!r} field of the container to the result of `producer`, unless already present.",
    Intent.UPDATE: "Updates the {key!r} field of the container by applying `updater` to its current value.",
}


def render_module(
    functions: SequenceType[GeneratedFunction], host: HostApi, context: Optional[CodegenContext] = None,
    doc: Optional[str] = None, source: Optional[str] = None, docstrings: bool = False
) -> str:
    """
    Renders the source code of a module containing the given wrapper functions.

    Args:
        functions: The emitted wrappers, in the order they should appear
        host: The host binding (determines the import statement)
        context: Layout options (width, indent). Defaults to 100 columns and an indent of 4.
        doc: A docstring for the module, if desired
        source: The name of the manifest (or other source) the module was generated from, mentioned in the header
        docstrings: Whether to give each wrapper a one-line docstring

    Returns:
        The module text, ending in a newline.
    """
    context = context or CodegenContext()

    ast = Sequence(
        (
            Section(_header_node(source), margin=0),
            Section(_module_doc_node(doc), margin_top=0, margin_bottom=1),
            Section(_imports_node(functions, host, context), margin_top=1, margin_bottom=2),
            Section(_all_node(functions), margin=2),
            *(_function_node(function, context, docstrings) for function in functions),
        ),
        items_margin=2
    )

    return '\n'.join(ast.render(context)) + '\n'


def _header_node(source: Optional[str]) -> CodegenNode:
    origin = f" from {source}" if source is not None else ""

    return WrapText(
        ReflowableText(
            f"This module was generated by {GENERATOR_NAME}{origin}. Do not edit it by hand: change the directives "
            f"and regenerate it instead."
        ),
        indent='# '
    )


def _module_doc_node(doc: Optional[str]) -> CodegenNode:
    if (doc is None) or (doc.strip() == ''):
        return NullNode()

    return WrapText(ReflowableText(_escape_docstring(doc)), head='"""', tail='"""')


def _imports_node(functions: SequenceType[GeneratedFunction], host: HostApi, context: CodegenContext) -> CodegenNode:
    operations = sorted(set(function.host_operation for function in functions))
    if len(operations) == 0:
        return NullNode()

    oneliner = f"from {host.module} import {', '.join(operations)}"
    if len(oneliner) <= context.width:
        return Atom(oneliner)

    return Block(
        ItemsList([Atom(operation) for operation in operations], joiner=', ', allow_horiz=False, trailing_comma=True),
        head=f"from {host.module} import (", tail=')', allow_oneliner=False
    )


def _all_node(functions: SequenceType[GeneratedFunction]) -> CodegenNode:
    public_names = [function.python_name for function in functions if function.is_public]
    if len(public_names) == 0:
        return NullNode()

    return Block(ItemsList([Atom(repr(name)) for name in public_names], joiner=', '), head='__all__ = [', tail=']')


def _function_node(function: GeneratedFunction, context: CodegenContext, docstrings: bool) -> CodegenNode:
    signature = Block(
        ItemsList([Atom(param) for param in function.parameter_names], joiner=', '),
        head=f"def {function.python_name}(",
    )

    call = Block(
        ItemsList([Atom(arg) for arg in function.call_arguments], joiner=', '),
        head=f"return {function.host_operation}(", tail=')'
    )

    body = Sequence((
        _function_doc_node(function, context.derive(sub_one_indent=True)) if docstrings else NullNode(),
        call,
    ))

    return ChainedBlocks((signature, Atom('):'), Block(body, allow_oneliner=False)))


def _function_doc_node(function: GeneratedFunction, context: CodegenContext) -> CodegenNode:
    text = _DOCSTRING_TEMPLATES[function.intent].format(key=function.key)

    oneliner = f'"""{text}"""'
    if len(oneliner) <= context.width:
        return Atom(oneliner)

    return WrapText(ReflowableText(text), head='"""', tail='"""')


def _escape_docstring(text: str) -> str:
    return text.replace('\\', '\\\\').replace('"""', '\\"\\"\\"')
