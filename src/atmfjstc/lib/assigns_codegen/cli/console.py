"""
Console abstraction for communicating with the user of the command-line tool.

It shows messages of various types (info, progress, warnings, errors) in appropriate colors (where available) and on
the appropriate stream (stdout vs stderr). A singleton(-ish) instance is available as the `console` property of this
module::

    from atmfjstc.lib.assigns_codegen.cli.console import console

    console.print_warning("test")

Most methods return the console object itself, enabling fluent calls like::

    console.print_progress("Generating...").print_success("Done")
"""

import sys

from typing import Optional, Tuple, TextIO

import colorama

from termcolor import cprint


colorama.just_fix_windows_console()


class Console:
    """
    An abstraction for communicating with the user via the terminal.

    Don't create your own instances of this.
    """

    _stdout_enabled: bool

    def __init__(self, enable_stdout: bool = True):
        self._stdout_enabled = enable_stdout

    def print_progress(self, message: str, **kwargs) -> 'Console':
        """
        Print a progress message, e.g. ``"Generating module..."``
        """
        return self.print_message('progress', message, **kwargs)

    def print_success(self, message: str, **kwargs) -> 'Console':
        return self.print_message('success', message, **kwargs)

    def print_warning(self, message: str, **kwargs) -> 'Console':
        """
        Print a warning message. It will be highlighted in yellow and sent to stderr.
        """
        return self.print_message('warning', message, **kwargs)

    def print_error(self, message: str, **kwargs) -> 'Console':
        """
        Print an error message. It will be highlighted in red and sent to stderr.
        """
        return self.print_message('error', message, **kwargs)

    def disable_stdout(self) -> 'Console':
        """
        Disables messages that would normally go to stdout (i.e. anything except warnings and errors).

        Needed when the program's actual output (e.g. generated code) is written to stdout.
        """
        self._stdout_enabled = False
        return self

    def enable_stdout(self) -> 'Console':
        self._stdout_enabled = True
        return self

    def print_message(self, kind: str, message: str, minor: bool = False) -> 'Console':
        """
        Prints a message of a programmatically specified type.

        Args:
            kind: Can be 'progress', 'success', 'warning', 'error' with the meanings as described by the
                respective `print_*` methods.
            message: The message to print. Can be multiline.
            minor: Signals that this message is less important than others of its kind (never bold)

        Returns:
            The console object (to enable a fluent interface)
        """
        props = _PROPS_BY_MSG_TYPE.get(kind, _PROPS_BY_MSG_TYPE['default'])

        channel_name = props.get('channel', 'stdout')
        if channel_name == 'stdout' and not self._stdout_enabled:
            return self

        channel = sys.stderr if channel_name == 'stderr' else sys.stdout

        attrs = props.get('attrs', ())
        if minor and ('bold' in attrs):
            attrs = tuple(attr for attr in attrs if attr != 'bold')

        _print_maybe_with_color(message, props.get('color'), attrs, channel)

        return self


def _print_maybe_with_color(text: str, color: Optional[str], attrs: Tuple[str, ...], channel: TextIO):
    if (color is None) and (len(attrs) == 0):
        print(text, file=channel)
    else:
        cprint(text, color, attrs=list(attrs), file=channel)


_PROPS_BY_MSG_TYPE = {
    'default': dict(),
    'progress': dict(),
    'success': dict(color='green', attrs=('bold',)),
    'warning': dict(color='yellow', attrs=('bold',), channel='stderr'),
    'error': dict(color='red', attrs=('bold',), channel='stderr'),
}


# Singleton
console = Console()
"""The currently active console abstraction."""
