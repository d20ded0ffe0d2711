"""
A width-aware layout model used for rendering the generated modules.

See `atmfjstc.lib.assigns_codegen.codegen.nodes` for the node types.
"""

from atmfjstc.lib.assigns_codegen.codegen.context import CodegenContext
from atmfjstc.lib.assigns_codegen.codegen.nodes import CodegenNode, PromptableNode, Atom, NullNode, Sequence, Section, \
    ItemsList, Block, ChainedBlocks, ReflowableText, WrapText
