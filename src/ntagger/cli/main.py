"""ntagger CLI - generate ctags-compatible tag files for Nim sources."""

from __future__ import annotations

from contextlib import nullcontext
from pathlib import Path

import click

from ntagger.cli.utils import resolve_output, resolve_root, split_positional, write_output
from ntagger.config import load_config
from ntagger.config.constants import PROGRAM_NAME, PROGRAM_VERSION
from ntagger.core.errors import ConfigError
from ntagger.core.logging import configure_logging, get_log_file_path, get_logger, set_run_id
from ntagger.core.progress import pluralize, status, suppress_console_logs
from ntagger.index.ops import GenerateResult, TagGenerator

log = get_logger("cli")


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_extra_args": True,
        "help_option_names": ["-h", "--help"],
    }
)
@click.version_option(version=PROGRAM_VERSION, prog_name=PROGRAM_NAME)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.option("-f", "--output", default=None, help="Output file; '-' for stdout")
@click.option("-e", "--exclude", "excludes", multiple=True, help="Skip files whose path contains PATTERN")
@click.option("-p", "--private", "include_private", is_flag=True, help="Include unexported declarations")
@click.option("-a", "--auto", is_flag=True, help="Also tag the toolchain's search paths")
@click.option("-s", "--system", is_flag=True, help="Also tag the standard library")
@click.option("--atlas", is_flag=True, help="Write project tags and a cached dependency tag file")
@click.option("--atlas-all", is_flag=True, help="Like --atlas, but always rebuild dependency tags")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    args: tuple[str, ...],
    output: str | None,
    excludes: tuple[str, ...],
    include_private: bool,
    auto: bool,
    system: bool,
    atlas: bool,
    atlas_all: bool,
    verbose: bool,
) -> None:
    """Generate a ctags file for the Nim sources under ROOT.

    ROOT defaults to the current directory. Tags go to stdout unless -f is
    given, or to ./tags in auto and atlas modes. Unrecognized arguments are
    ignored.
    """
    root_arg, ignored = split_positional(args)
    root = resolve_root(root_arg)

    try:
        config = load_config(root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    set_run_id()
    if ignored:
        log.warning("ignored_cli_args", args=ignored)

    atlas_mode = atlas or atlas_all
    output_path = resolve_output(output, file_by_default=auto or atlas_mode)
    # Paths in the tag file are relative to the directory the file lives in
    base_dir = output_path.parent if output_path is not None else Path.cwd()
    include_private = include_private or config.tags.include_private
    patterns = [*config.tags.exclude, *excludes]

    generator = TagGenerator(config)
    logs_to_stdout = any(o.destination == "stdout" for o in config.logging.outputs)
    guard = suppress_console_logs() if output_path is None and logs_to_stdout else nullcontext()

    with guard:
        if atlas_mode:
            deps_path = base_dir / config.atlas.deps_tags_name
            try:
                atlas_result = generator.generate_atlas(
                    root,
                    deps_path=deps_path,
                    rebuild_deps=atlas_all,
                    base_dir=base_dir,
                    excludes=patterns,
                    include_private=include_private,
                    system=system,
                )
            except OSError as e:
                raise click.ClickException(f"Cannot write {deps_path}: {e.strerror or e}") from e
            result = atlas_result.project
            if atlas_result.deps is not None:
                _report(atlas_result.deps, atlas_result.deps_path)
        else:
            roots = generator.resolve_roots(root, auto=auto, system=system)
            result = generator.generate(
                roots,
                base_dir=base_dir,
                excludes=patterns,
                include_private=include_private,
            )

        try:
            write_output(result.content, output_path)
        except OSError as e:
            raise click.ClickException(f"Cannot write {output_path}: {e.strerror or e}") from e

    log.info("tags_written", path=str(output_path or "-"), tags=result.tag_count, files=result.files_scanned)
    if output_path is not None:
        _report(result, output_path)


def _report(result: GenerateResult, path: Path) -> None:
    status(
        f"Wrote {pluralize(result.tag_count, 'tag')} from "
        f"{pluralize(result.files_scanned, 'file')} to {path}",
        style="success",
    )
    if result.failed_files:
        message = f"Skipped {pluralize(len(result.failed_files), 'unparsable file')}"
        if log_file := get_log_file_path():
            message += f". See {log_file} for details."
        status(message, style="warning", indent=2)


if __name__ == "__main__":
    cli()
