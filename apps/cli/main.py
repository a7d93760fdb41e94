"""Typer CLI entrypoint for libresolve."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Literal, cast

import typer

from apps.cli.io import write_json_atomic, write_text_atomic
from core.libraries.call_parser import parse_call, parse_library_name
from core.libraries.descriptors import get_latest_commit_to_libraries, parse_library_descriptor
from core.libraries.models import Brackets
from core.libraries.settings import LibrariesSettings, load_settings
from core.orchestrator.pipeline import resolve_invocation
from core.utils.errors import (
    ArgumentBindingError,
    CallParseError,
    DescriptorParseError,
    MissingVariableError,
)
from core.utils.events import dump_json

app = typer.Typer(help="Library call resolution CLI", rich_markup_mode=None)
BracketsMode = Literal["round", "square"]

_BRACKETS: dict[BracketsMode, Brackets] = {
    "round": Brackets.ROUND,
    "square": Brackets.SQUARE,
}


@app.callback()
def cli_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Emit structured INFO logs to stderr.")
    ] = False,
) -> None:
    """Developer tools for library call syntax and descriptors."""

    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s %(message)s")


@app.command("parse")
def parse_command(
    call: Annotated[str, typer.Argument(help="Call text, e.g. 'lib(a=1, \"b\")'.")],
    brackets: Annotated[str, typer.Option()] = "round",
    out: Annotated[Path | None, typer.Option(help="Write the JSON here instead.")] = None,
) -> None:
    """Parse one call and print its name and arguments as JSON."""

    normalized_brackets = brackets.lower().strip()
    if normalized_brackets not in _BRACKETS:
        typer.echo("ERROR: --brackets must be one of: round, square.")
        raise typer.Exit(code=1)

    try:
        name, arguments = parse_call(call, _BRACKETS[cast(BracketsMode, normalized_brackets)])
    except CallParseError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=2) from exc

    payload = {
        "name": name,
        "arguments": [{"name": item.name, "value": item.value} for item in arguments],
    }
    if out is not None:
        write_json_atomic(out, payload)
        typer.echo(f"INFO: wrote {out}")
    else:
        typer.echo(dump_json(payload))


@app.command("inject")
def inject_command(
    call: Annotated[str, typer.Argument(help="Invocation naming the descriptor's library.")],
    descriptor: Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)],
    lenient: Annotated[
        bool,
        typer.Option("--lenient", help="Leave unresolved ${var} placeholders verbatim."),
    ] = False,
    out: Annotated[Path | None, typer.Option(help="Write the code here instead.")] = None,
) -> None:
    """Print the repository/dependency/import code a call injects."""

    try:
        name, _ = parse_library_name(call)
        parsed = parse_library_descriptor(descriptor.read_text(encoding="utf-8"), name=name)
        resolved = resolve_invocation(call, {name: parsed}, strict=not lenient)
    except (
        CallParseError,
        DescriptorParseError,
        ArgumentBindingError,
        MissingVariableError,
    ) as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=2) from exc

    if not resolved.init_code:
        typer.echo("INFO: no code to inject")
        return

    code = "".join(resolved.init_code)
    if out is not None:
        write_text_atomic(out, code)
        typer.echo(f"INFO: wrote {out}")
    else:
        typer.echo(code, nl=False)


@app.command("latest-commit")
def latest_commit_command(
    ref: Annotated[str | None, typer.Option(help="Branch, tag or sha.")] = None,
    since: Annotated[str | None, typer.Option(help="ISO-8601 lower bound.")] = None,
    settings: Annotated[
        Path | None, typer.Option(exists=True, dir_okay=False, file_okay=True)
    ] = None,
) -> None:
    """Print the newest commit to the descriptors directory, if any."""

    try:
        settings_model: LibrariesSettings = load_settings(settings)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=1) from exc

    result = get_latest_commit_to_libraries(
        ref or settings_model.default_ref, since, settings=settings_model
    )
    if result is None:
        typer.echo("INFO: no commit information available")
        return

    sha, timestamp = result
    typer.echo(f"{sha} {timestamp}")


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
