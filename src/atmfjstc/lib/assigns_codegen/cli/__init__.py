"""
The ``assigns-codegen`` command-line tool.

Usage::

    assigns-codegen [--check | --stdout] [--width N] [--indent N] [-v] MANIFEST

By default, every unit in the manifest is generated and written to its output file (files whose content would not
change are left untouched). With ``--check``, nothing is written, and the exit code is 1 if any output is missing or out
of date. With ``--stdout``, the generated code is printed instead of written.
"""

import logging
import sys

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import List, Optional, Sequence

from atmfjstc.lib.assigns_codegen import __version__
from atmfjstc.lib.assigns_codegen.cli.console import console
from atmfjstc.lib.assigns_codegen.cli.errors import pretty_unhandled, descriptive_errors, fail
from atmfjstc.lib.assigns_codegen.codegen import CodegenContext
from atmfjstc.lib.assigns_codegen.errors import AssignsCodegenError
from atmfjstc.lib.assigns_codegen.generate import GeneratedModule, generate_manifest
from atmfjstc.lib.assigns_codegen.manifest import Manifest, load_manifest, MIN_WIDTH
from atmfjstc.lib.assigns_codegen.output import is_up_to_date, write_generated_file
from atmfjstc.lib.assigns_codegen.render import GENERATOR_NAME


LOG = logging.getLogger(__name__)


@pretty_unhandled
def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    _setup_logging(args.verbose)

    if args.stdout:
        console.disable_stdout()

    try:
        with descriptive_errors(AssignsCodegenError):
            manifest = load_manifest(args.manifest)
            modules = generate_manifest(manifest, _codegen_context(manifest, args))

            if args.stdout:
                return _print_modules(modules)
            if args.check:
                return _check_modules(modules, args.manifest)

            return _write_modules(modules)
    finally:
        console.enable_stdout()


def _parse_args(argv: Optional[List[str]]) -> Namespace:
    parser = ArgumentParser(
        prog=GENERATOR_NAME,
        description="Generates state-container wrapper functions (assign_*, assign_new_*, update_*) from a manifest.",
    )

    parser.add_argument('manifest', metavar='MANIFEST', type=Path, help="Path to the JSON manifest")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--check', action='store_true',
        help="Don't write anything, just check that all outputs are up to date (exit code 1 if not)"
    )
    mode.add_argument(
        '--stdout', action='store_true',
        help="Print the generated code to stdout instead of writing the output files"
    )

    parser.add_argument('--width', type=int, help="Override the line width set in the manifest")
    parser.add_argument('--indent', type=int, help="Override the indent size set in the manifest")
    parser.add_argument('-v', '--verbose', action='store_true', help="Show debug messages")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        style='{',
        format='[{asctime}] {levelname}: {message}',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _codegen_context(manifest: Manifest, args: Namespace) -> CodegenContext:
    width = manifest.width if args.width is None else args.width
    indent = manifest.indent if args.indent is None else args.indent

    if width < MIN_WIDTH:
        fail(f"The line width must be at least {MIN_WIDTH} columns (got: {width})")
    if not (1 <= indent <= 8):
        fail(f"The indent must be between 1 and 8 columns (got: {indent})")

    return CodegenContext(width=width, indent=indent)


def _print_modules(modules: Sequence[GeneratedModule]) -> int:
    for index, module in enumerate(modules):
        if len(modules) > 1:
            if index > 0:
                sys.stdout.write('\n')
            sys.stdout.write(f"# ==> {_display_path(module.path)} <==\n")

        sys.stdout.write(module.source)

    return 0


def _check_modules(modules: Sequence[GeneratedModule], manifest_path: Path) -> int:
    stale = [module for module in modules if not is_up_to_date(module.path, module.source)]

    for module in stale:
        console.print_warning(f"Out of date: {_display_path(module.path)}")

    if len(stale) > 0:
        console.print_error(
            f"{len(stale)} of {len(modules)} generated module(s) are out of date. "
            f"Run '{GENERATOR_NAME} {manifest_path}' to regenerate them."
        )
        return 1

    console.print_success(f"All {len(modules)} generated module(s) are up to date")

    return 0


def _write_modules(modules: Sequence[GeneratedModule]) -> int:
    n_written = 0

    for module in modules:
        if write_generated_file(module.path, module.source):
            console.print_progress(f"Wrote {_display_path(module.path)}")
            n_written += 1
        else:
            LOG.debug("Skipped unchanged %s", module.path)

    console.print_success(f"Generated {len(modules)} module(s), {n_written} changed")

    return 0


def _display_path(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)
