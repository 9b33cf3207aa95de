from __future__ import annotations

import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

import structlog
import typer
from pydantic import ValidationError

from tortilla.config import logging_settings, wrap_settings
from tortilla.deps import fetch_dependencies, parse_coords
from tortilla.exceptions import (
    ClassNotResolvable,
    DependencyResolutionError,
    InvalidFilterPattern,
    NeverRaise,
    TortillaError,
)
from tortilla.invariants import proof_mode_scope
from tortilla.order_contract import OrderPolicy
from tortilla.reflect.filters import MemberFilter, compile_pattern
from tortilla.reflect.resolve import resolve_class
from tortilla.runtime.log_policy import configure_logging
from tortilla.synthesis.assembler import generate
from tortilla.synthesis.coercion import coerce as default_coerce
from tortilla.synthesis.coercion import resolve_callable
from tortilla.synthesis.model import Coercion, WrapOptions
from tortilla.synthesis.source import render_routines
from tortilla.types import type_name

log = structlog.get_logger()

app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(ctx: typer.Context, error: str) -> NoReturn:
    typer.echo("\n".join(["Error:", error, "", ctx.get_help()]), err=True)
    raise typer.Exit(code=1)


def _combined_pattern(patterns: Sequence[str]) -> str | None:
    for pattern in patterns:
        compile_pattern(pattern)
    if not patterns:
        return None
    if len(patterns) == 1:
        return patterns[0]
    return "|".join(f"(?:{pattern})" for pattern in patterns)


def _coercion(value: bool | str) -> Coercion | None:
    if value is False:
        return None
    if value is True:
        return default_coerce
    return resolve_callable(value)


def _emit_class(cls: type, options: WrapOptions, *, metadata: bool, width: int) -> None:
    typer.echo("")
    typer.echo(f"# ==== {type_name(cls)} ====")
    output = generate(cls, options)
    if options.members_only:
        for descriptor in output:
            typer.echo(descriptor)
        return
    typer.echo(render_routines(output, metadata=metadata, width=width), nl=False)


@app.command()
def wrap(
    ctx: typer.Context,
    arguments: Optional[List[str]] = typer.Argument(None, hidden=True),
    classes: Optional[List[str]] = typer.Option(
        None,
        "-c",
        "--class",
        help="Class to generate a wrapper for. May be specified multiple times.",
    ),
    members: bool = typer.Option(
        False,
        "-m",
        "--members",
        help="Print the list of class members instead of wrapper code.",
    ),
    include: Optional[str] = typer.Option(
        None,
        "-i",
        "--include",
        help="Only wrap members matching REGEX, in the format name(arg.type,...):return.type",
        metavar="REGEX",
    ),
    exclude: Optional[str] = typer.Option(
        None,
        "-x",
        "--exclude",
        help="Exclude members matching REGEX from wrapping.",
        metavar="REGEX",
    ),
    metadata: Optional[bool] = typer.Option(
        None, "--metadata/--no-metadata", help="Include signature docstrings in output."
    ),
    instrument: Optional[bool] = typer.Option(
        None,
        "--instrument/--no-instrument",
        help="Verify invariants of every generated routine.",
    ),
    coerce: Optional[bool] = typer.Option(
        None, "--coerce/--no-coerce", help="Include the coercion function."
    ),
    width: Optional[int] = typer.Option(
        None, "-w", "--width", min=1, help="Limit output width.", metavar="CHARS"
    ),
    deps: Optional[List[str]] = typer.Option(
        None,
        "-d",
        "--dep",
        help=(
            "Install a distribution before wrapping. May be specified multiple times. "
            "COORD is '[group/artifact \"version\"]' or group:artifact:version; "
            "the group part is optional."
        ),
        metavar="COORD",
    ),
    prefix: Optional[str] = typer.Option(
        None, "-p", "--prefix", help="Prefix for every generated routine name."
    ),
    order: Optional[str] = typer.Option(
        None, "--order", help="Member order: declared (default) or sorted."
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to tortilla.toml."),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
) -> None:
    """Generate overload-dispatch wrappers for classes."""
    if arguments:
        _fail(ctx, "Options must start with a hyphen")
    if not classes:
        _fail(ctx, "Must supply at least one class to wrap")
    try:
        settings = wrap_settings(
            {
                "prefix": prefix,
                "order": order,
                "width": width,
                "include": [include] if include is not None else None,
                "exclude": [exclude] if exclude is not None else None,
                "coerce": coerce,
                "metadata": metadata,
                "instrument": instrument,
            },
            config_path=config,
        )
        log_config = logging_settings({"level": log_level}, config_path=config)
    except ValidationError as exc:
        _fail(ctx, str(exc))
    configure_logging(level=log_config.level, json_format=log_config.json_format)

    try:
        predicate = MemberFilter.from_patterns(
            _combined_pattern(settings.include),
            _combined_pattern(settings.exclude),
        )
    except InvalidFilterPattern as exc:
        _fail(ctx, str(exc))
    try:
        hook = _coercion(settings.coerce)
    except (ImportError, AttributeError, TypeError, ValueError) as exc:
        _fail(ctx, f"Invalid coercion function {settings.coerce!r}: {exc}")

    if deps:
        try:
            coords = [parse_coords(dep) for dep in deps]
        except ValueError as exc:
            _fail(ctx, str(exc))
        typer.echo(
            f"Adding dependencies to import path: {', '.join(map(str, coords))}", err=True
        )
        try:
            fetch_dependencies(coords)
        except DependencyResolutionError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1)

    options = WrapOptions(
        prefix=settings.prefix,
        coerce=hook,
        filter_predicate=predicate,
        members_only=members,
        order=settings.order_policy() or OrderPolicy.TRUST,
    )
    exit_code = 0
    with proof_mode_scope(settings.instrument):
        for handle in classes:
            try:
                cls = resolve_class(handle)
            except ClassNotResolvable as exc:
                log.error("cli.class_unresolvable", handle=handle, reason=exc.reason)
                typer.echo(str(exc), err=True)
                exit_code = 1
                continue
            try:
                _emit_class(cls, options, metadata=settings.metadata, width=settings.width)
            except (TortillaError, NeverRaise) as exc:
                log.error("cli.generation_failed", cls=type_name(cls), error=str(exc))
                typer.echo(f"Failed to wrap {type_name(cls)}: {exc}", err=True)
                exit_code = 1
    raise typer.Exit(code=exit_code)


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        app(args=args, prog_name="tortilla")
    except SystemExit as exc:
        # usage errors exit 2 in standalone mode
        return 0 if exc.code in (None, 0) else 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
