from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CodegenContext:
    """
    Holds options that control how a layout node is rendered.

    Objects of this type are immutable. To "modify" a context, create an altered copy by calling its `derive` function.

    Attributes:
        width: The number of columns available for rendering the code. The renderer will do its best to ensure that
            the code fits this width, but success is not guaranteed (e.g. for very long identifiers).
        indent: The number of columns by which code inside blocks will be indented
        oneliner: Signal that a one-liner rendering is preferable. A node may or may not be able to honor this,
            depending on its type, content, and available width.
    """

    width: int = 100
    indent: int = 4
    oneliner: bool = False

    def __post_init__(self):
        if self.indent < 1:
            raise ValueError(f"Indent must be at least 1 column (got: {self.indent})")

    def derive(
        self, width: Optional[int] = None, indent: Optional[int] = None, add_width: int = 0, sub_width: int = 0,
        sub_one_indent: bool = False, oneliner: Optional[bool] = None
    ) -> 'CodegenContext':
        """
        Creates a modified copy of this rendering context.

        Args:
            width: The new width for the context (or None to leave it unchanged)
            indent: The new indent size for the context (or None to leave it unchanged)
            add_width: The number of columns to add to the width
            sub_width: The number of columns to subtract from the width
            sub_one_indent: Subtracts the indent size from the available width (a very common operation)
            oneliner: The new 'request oneliner' flag for the context (or None to leave it unchanged)

        Returns:
            A context with the modifications performed.
        """
        def coalesce(a, b):
            return a if b is None else b

        return CodegenContext(
            width=coalesce(self.width, width) + add_width - sub_width - (self.indent if sub_one_indent else 0),
            indent=coalesce(self.indent, indent),
            oneliner=coalesce(self.oneliner, oneliner),
        )
