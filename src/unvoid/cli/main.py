"""unvoid CLI - rewrite `f(void)` to `f()` across a C++ code base.

Usage::

    unvoid <build-path> <file1> <file2> ...
    unvoid <build-path> <file1> ... -- <compiler flags>

<build-path> is a build directory containing compile_commands.json (enable
-DCMAKE_EXPORT_COMPILE_COMMANDS in CMake to get it). Flags given after
``--`` are used for every file instead of the database.

Exit codes:
    0 - success
    1 - configuration or compilation database error
    2 - bad CLI arguments (click default)
    3 - a file could not be parsed or saved
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

import click

from unvoid.config.loader import load_config
from unvoid.core.errors import CompilationDatabaseError, ConfigError, UnvoidError
from unvoid.core.logging import clear_run_id, configure_logging, get_logger, set_run_id
from unvoid.core.progress import pluralize, status
from unvoid.frontend.compdb import load_compilation_database, split_fixed_flags
from unvoid.frontend.treesitter import TreeSitterParser
from unvoid.mutation.ops import MutationOps, export_fixes
from unvoid.rewrite.ops import RewriteOps

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_FAILED = 3

log = get_logger("cli")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version="0.1.0", prog_name="unvoid")
@click.argument("build_path", metavar="BUILD_PATH", type=click.Path(path_type=Path))
@click.argument("sources", metavar="SOURCE...", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--dry-run", is_flag=True, help="Print a diff instead of modifying files")
@click.option(
    "--export-fixes",
    "fixes_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write replacements to a YAML file instead of modifying files",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: ./.unvoid.yaml)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    build_path: Path,
    sources: tuple[Path, ...],
    dry_run: bool,
    fixes_path: Path | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Replace `(void)` parameter lists with `()` in C++ sources."""
    ctx.ensure_object(dict)
    fixed_flags: list[str] | None = ctx.obj.get("fixed_flags")

    try:
        config = load_config(config_path=config_path)
    except ConfigError as e:
        configure_logging(level="DEBUG" if verbose else "WARNING")
        status(str(e), style="error")
        ctx.exit(EXIT_CONFIG)
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    set_run_id()
    ctx.call_on_close(clear_run_id)

    try:
        compdb = load_compilation_database(build_path, fixed_flags, filename=config.compdb.filename)
        parser = TreeSitterParser(c_extensions=frozenset(config.rewrite.c_extensions))
        result = RewriteOps(compdb, parser).run(sources)
    except CompilationDatabaseError as e:
        log.error("compdb_error", error=str(e), code=e.code.value)
        status(str(e), style="error")
        ctx.exit(EXIT_CONFIG)

    for failure in result.failures:
        status(f"Could not parse {failure.path}: {failure.error.message}", style="error")

    edits = result.edits
    exit_code = EXIT_OK if result.ok else EXIT_FAILED

    if fixes_path is not None:
        try:
            export_fixes(edits, fixes_path, main_source_file=str(sources[0]))
        except UnvoidError as e:
            status(str(e), style="error")
            ctx.exit(EXIT_FAILED)
        status(
            f"Exported {pluralize(len(edits), 'replacement')} in "
            f"{pluralize(len(edits.files), 'file')} to {fixes_path}",
            style="success",
        )
        ctx.exit(exit_code)

    mutation = MutationOps().apply(edits, dry_run=dry_run)
    for delta in mutation.files:
        if delta.unified_diff:
            click.echo(delta.unified_diff, nl=False)
    for apply_failure in mutation.failures:
        status(apply_failure.error.message, style="error")
    if not mutation.ok:
        exit_code = EXIT_FAILED

    verb = "Would rewrite" if dry_run else "Rewrote"
    status(
        f"{verb} {pluralize(mutation.edits_applied, 'function')} in "
        f"{pluralize(len(mutation.files), 'file')}",
        style="success" if exit_code == EXIT_OK else "warning",
    )
    ctx.exit(exit_code)


def main(argv: Sequence[str] | None = None) -> None:
    """Console entry point; splits compiler flags off at ``--`` before click sees them."""
    args, fixed_flags = split_fixed_flags(sys.argv[1:] if argv is None else argv)
    cli.main(args=args, prog_name="unvoid", obj={"fixed_flags": fixed_flags})


if __name__ == "__main__":
    main()
