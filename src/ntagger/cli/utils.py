"""CLI utilities."""

from pathlib import Path

import click

from ntagger.config.constants import DEFAULT_TAGS_FILE, STDOUT_MARKER


def split_positional(args: tuple[str, ...]) -> tuple[str | None, list[str]]:
    """Pick the root directory out of leftover arguments.

    The first argument that does not start with ``-`` is the root. Everything
    else (unknown flags, extra positionals) is returned as ignored.
    """
    root: str | None = None
    ignored: list[str] = []
    for arg in args:
        if root is None and not arg.startswith("-"):
            root = arg
        else:
            ignored.append(arg)
    return root, ignored


def resolve_root(root_arg: str | None) -> Path:
    """Root directory to scan, defaulting to the current directory.

    Raises:
        click.ClickException: If the root is not an existing directory
    """
    root = Path(root_arg) if root_arg else Path.cwd()
    if not root.is_dir():
        raise click.ClickException(f"Not a directory: {root}")
    return root


def resolve_output(output: str | None, *, file_by_default: bool) -> Path | None:
    """Output file path, or None for standard output.

    Without -f the tags go to stdout, except in auto and atlas modes where
    they go to the default ``tags`` file.
    """
    if output is None:
        output = DEFAULT_TAGS_FILE if file_by_default else STDOUT_MARKER
    if output == STDOUT_MARKER:
        return None
    return Path(output).absolute()


def write_output(content: bytes, output_path: Path | None) -> None:
    """Write tag file bytes to the output file or stdout."""
    if output_path is None:
        stream = click.get_binary_stream("stdout")
        stream.write(content)
        stream.flush()
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(content)
