"""
Utilities for nicely handling errors in the command-line tool.
"""

import sys
import traceback

from contextlib import contextmanager
from functools import wraps
from textwrap import dedent, indent
from typing import Callable, Iterator, List, NoReturn

from atmfjstc.lib.assigns_codegen.cli.console import console


class DescriptiveError(RuntimeError):
    """
    An error where it is clear from the message what happened and where, such that the traceback is redundant.

    Only the message is shown for these errors (see `pretty_unhandled`). Library code should raise its own exception
    types; use `descriptive_errors` to convert them at the level of the command-line program.
    """


def fail(message: str) -> NoReturn:
    """
    Shortcut for throwing a `DescriptiveError`.
    """
    raise DescriptiveError(dedent(message).strip())


@contextmanager
def descriptive_errors(*classes: type) -> Iterator[None]:
    """
    Use ``with descriptive_errors(Exc1, Exc2, ...): <code>`` to transform all exceptions of the given kinds into
    descriptive errors.
    """
    try:
        yield
    except classes as e:
        raise DescriptiveError(
            short_format_exception(e, follow_cause=False, force_descriptive=True)
        ) from e.__cause__


def short_format_exception(exception: BaseException, follow_cause: bool = True, force_descriptive: bool = False) -> str:
    """
    Presents an exception in a short format, without the traceback.

    For descriptive errors, only the message is shown. For other exceptions, the class name is shown too. Causes are
    followed and shown indented below, so the return value may be multiline.
    """
    causes = _causal_chain(exception, follow_cause)

    if force_descriptive or isinstance(exception, DescriptiveError):
        head = str(exception) or exception.__class__.__name__

        return '\n'.join([
            head,
            *(
                indent(short_format_exception(cause, follow_cause=False, force_descriptive=True), '  ')
                for cause in causes[1:]
            )
        ])

    return '\n'.join([
        _format_exception_head(exception),
        *(indent(_format_exception_head(cause), '  ') for cause in causes[1:])
    ])


def pretty_print_exception(exception: BaseException):
    """
    Prints an exception on the console.

    Descriptive errors are shown as just their message. All other exceptions are assumed to be bugs and are shown with
    their full traceback.
    """
    if isinstance(exception, KeyboardInterrupt):
        console.print_warning("Stopped by user")
        return

    if isinstance(exception, DescriptiveError):
        console.print_error(short_format_exception(exception))
        return

    for index, cause in enumerate(_causal_chain(exception, follow_cause=True)):
        base_indent = '' if index == 0 else '  '

        if index > 0:
            console.print_error("Cause:", minor=True)

        console.print_error(indent(_format_exception_head(cause), base_indent))
        console.print_error(base_indent + "Traceback:", minor=True)
        console.print_error(indent(_format_exception_trace(cause), base_indent + '  '), minor=True)


def pretty_unhandled(main_method: Callable) -> Callable:
    """
    Decorator for a main method that causes unhandled exceptions to be displayed in a pretty way, after which the
    program exits with code -1.
    """

    @wraps(main_method)
    def wrapper(*args, **kwargs):
        try:
            return main_method(*args, **kwargs)
        except SystemExit:
            raise
        except KeyboardInterrupt as e:
            pretty_print_exception(e)
            sys.exit(0)
        except Exception as e:
            pretty_print_exception(e)

        sys.exit(-1)

    return wrapper


def _causal_chain(exception: BaseException, follow_cause: bool) -> List[BaseException]:
    result = [exception]

    while follow_cause and exception.__cause__ is not None:
        exception = exception.__cause__
        result.append(exception)

    return result


def _format_exception_head(exception: BaseException) -> str:
    return ''.join(traceback.format_exception_only(exception.__class__, exception)).rstrip()


def _format_exception_trace(exception: BaseException) -> str:
    return dedent(''.join(traceback.format_list(traceback.extract_tb(exception.__traceback__))).rstrip())
