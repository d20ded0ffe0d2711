"""
Small iteration and text helpers shared by the layout nodes.
"""

import re

from collections.abc import Sequence
from typing import Iterable, Tuple, TypeVar, Optional, Callable, List


T = TypeVar('T')


def iter_with_last(seq: Iterable[T]) -> Iterable[Tuple[T, bool]]:
    """
    Iterates over a sequence (list, tuple, generator etc) and adds to each value an indication of whether it is the
    last in the sequence.
    """
    buffer = None
    buffer_used = False

    for item in seq:
        if buffer_used:
            yield buffer, False

        buffer = item
        buffer_used = True

    if buffer_used:
        yield buffer, True


def last_index_where(seq: Sequence, callback: Callable[[T], bool]) -> Optional[int]:
    """
    Returns the last index in a sequence for which a callback applied to its element holds true, or None.
    """
    for index in range(len(seq) - 1, -1, -1):
        if callback(seq[index]):
            return index

    return None


def check_single_line(value: str, value_name: str = 'value') -> str:
    """Checks that a string does not contain newlines and returns it, otherwise throws a `ValueError`"""
    if '\n' in value:
        raise ValueError(f"{value_name.capitalize()} must be a single-line string")

    return value


def split_paragraphs(text: str) -> List[str]:
    """
    Splits a text into paragraphs (areas separated by more than one newline), keeping the separators on the odd
    indexes of the returned list.
    """
    return re.split(r'(\n\s*\n)', text)
