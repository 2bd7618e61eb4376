"""Command-line front end (Typer-based).

Provides :func:`build_cli`, a Typer app whose callback parses the
global options (``--version``, ``--log-level``, ``--log-format``,
``--output``, ``--env-file``), loads :class:`Settings` and configures
logging, and whose commands run one duration operation each::

    attospan normalize 3 -- -123000000000000000
    attospan convert 1.5 minutes
    attospan ratio 1 3 --unit hours
    attospan multiply 1.5 4 --unit milliseconds
    attospan divide 10 3

Amounts without ``--unit`` are read in ``settings.unit`` (seconds by
default).  Results are printed as ``key=value`` pairs
(``--output text``) or one JSON object (``--output json``).  Arithmetic
errors are reported as an :class:`~attospan.ErrorPayload` in JSON mode
and as ``error: ...`` on stderr in text mode.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from enum import Enum
from typing import Annotated, Any, get_args

import typer
from pydantic import ValidationError

from attospan import __version__
from attospan._duration import Duration
from attospan._errors import AttospanError, build_error_payload
from attospan._logging import configure_logging
from attospan._settings import LogFormat, LogLevel, OutputFormat, Settings, UnitName

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_RUNTIME_ERROR = 3

_SERVICE = "attospan"

# Negative numbers are positional arguments, not unknown short options.
_NUMERIC_ARGS = {"ignore_unknown_options": True}


class Unit(str, Enum):
    WEEKS = "weeks"
    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"
    MICROSECONDS = "microseconds"
    NANOSECONDS = "nanoseconds"


# Unit names double as the Duration constructor names.
_CONSTRUCTORS: dict[str, Callable[[int | float], Duration]] = {
    name: getattr(Duration, name) for name in get_args(UnitName)
}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _choice(value: str | None, allowed: tuple[str, ...], flag: str) -> str | None:
    """Return the entry of *allowed* matching *value* case-insensitively."""
    if value is None:
        return None
    for candidate in allowed:
        if candidate.lower() == value.lower():
            return candidate
    raise typer.BadParameter(
        f"Invalid value '{value}'. Choose from: {', '.join(allowed)}",
        param_hint=f"'{flag}'",
    )


def _parse_number(text: str) -> int | float:
    """Parse an integer when possible so that it converts exactly."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise typer.BadParameter(f"'{text}' is not a number") from None


def _to_duration(text: str, unit: str) -> Duration:
    return _CONSTRUCTORS[unit](_parse_number(text))


def _unit_name(ctx: typer.Context, unit: Unit | None) -> str:
    settings: Settings = ctx.obj
    return settings.unit if unit is None else unit.value


def _components(duration: Duration) -> dict[str, Any]:
    seconds, attoseconds = duration.components
    return {"seconds": seconds, "attoseconds": attoseconds}


def _format_text(result: dict[str, Any]) -> str:
    def pairs(values: dict[str, Any]) -> str:
        return " ".join(f"{key}={value}" for key, value in values.items())

    if all(isinstance(value, dict) for value in result.values()):
        return "\n".join(f"{key}: {pairs(value)}" for key, value in result.items())
    return pairs(result)


def _run(ctx: typer.Context, compute: Callable[[], dict[str, Any]]) -> None:
    """Run *compute* and print its result, or report the error and exit."""
    settings: Settings = ctx.obj
    try:
        result = compute()
    except (AttospanError, ZeroDivisionError, ValueError) as exc:
        logger.debug(
            "Command %s failed",
            ctx.info_name,
            exc_info=True,
            extra={"command": ctx.info_name},
        )
        if settings.output == "json":
            typer.echo(build_error_payload(exc).to_json())
        else:
            typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(EXIT_RUNTIME_ERROR) from exc

    logger.debug(
        "Command %s succeeded",
        ctx.info_name,
        extra={"command": ctx.info_name, "result": result},
    )
    if settings.output == "json":
        typer.echo(json.dumps(result))
    else:
        typer.echo(_format_text(result))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{_SERVICE} v{__version__}")
        raise typer.Exit()


def _load_settings(env_file: str, flags: dict[str, str | None]) -> Settings:
    """Read settings from the environment and *env_file*, then apply *flags*.

    ``level`` and ``format`` flags land in ``settings.logging``; the
    rest are top-level fields.  ``None`` means the flag was not given.
    Invalid sources exit with :data:`EXIT_CONFIG_ERROR`.
    """
    try:
        settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(EXIT_CONFIG_ERROR) from exc

    given = {key: value for key, value in flags.items() if value is not None}
    logging_update = {key: given.pop(key) for key in ("level", "format") if key in given}
    if logging_update:
        given["logging"] = settings.logging.model_copy(update=logging_update)
    return settings.model_copy(update=given)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

UnitOption = Annotated[
    Unit | None,
    typer.Option("--unit", "-u", help="Unit of the amounts [default: settings.unit]"),
]


def build_cli() -> typer.Typer:
    """Construct the ``attospan`` Typer application."""
    cli = typer.Typer(
        help=f"{_SERVICE} v{__version__}: exact attosecond duration arithmetic",
        no_args_is_help=True,
    )

    # -- global options -----------------------------------------------------

    @cli.callback()
    def main(
        ctx: typer.Context,
        version_flag: Annotated[
            bool | None,
            typer.Option(
                "--version",
                callback=_version_callback,
                is_eager=True,
                help="Show version and exit.",
            ),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option("--log-level", help="Override the log level."),
        ] = None,
        log_format: Annotated[
            str | None,
            typer.Option("--log-format", help="Override the log format."),
        ] = None,
        output: Annotated[
            str | None,
            typer.Option("--output", help="Result format: text or json."),
        ] = None,
        env_file: Annotated[
            str,
            typer.Option("--env-file", help="Path to .env file."),
        ] = ".env",
    ) -> None:
        flags = {
            "level": _choice(log_level, get_args(LogLevel), "--log-level"),
            "format": _choice(log_format, get_args(LogFormat), "--log-format"),
            "output": _choice(output, get_args(OutputFormat), "--output"),
        }
        settings = _load_settings(env_file, flags)
        configure_logging(settings.logging, service=_SERVICE, version=__version__)
        ctx.obj = settings

    # -- commands -----------------------------------------------------------

    @cli.command(context_settings=_NUMERIC_ARGS)
    def normalize(
        ctx: typer.Context,
        seconds: Annotated[int, typer.Argument(help="Whole seconds.")],
        attoseconds: Annotated[
            int, typer.Argument(help="Attoseconds to add; any sign or size.")
        ],
    ) -> None:
        """Build a duration from seconds plus attoseconds and print its components."""
        _run(ctx, lambda: _components(Duration.from_components(seconds, attoseconds)))

    @cli.command(context_settings=_NUMERIC_ARGS)
    def convert(
        ctx: typer.Context,
        value: Annotated[str, typer.Argument(help="Integer or decimal amount.")],
        unit: Annotated[Unit, typer.Argument(help="Unit of VALUE.")],
    ) -> None:
        """Convert an amount of a time unit into components."""
        _run(ctx, lambda: _components(_to_duration(value, unit.value)))

    @cli.command(context_settings=_NUMERIC_ARGS)
    def ratio(
        ctx: typer.Context,
        numerator: Annotated[str, typer.Argument(help="Numerator amount.")],
        denominator: Annotated[str, typer.Argument(help="Denominator amount.")],
        unit: UnitOption = None,
    ) -> None:
        """Print the approximate ratio of two durations."""
        name = _unit_name(ctx, unit)
        _run(
            ctx,
            lambda: {
                "ratio": _to_duration(numerator, name) / _to_duration(denominator, name)
            },
        )

    @cli.command(context_settings=_NUMERIC_ARGS)
    def multiply(
        ctx: typer.Context,
        value: Annotated[str, typer.Argument(help="Duration amount.")],
        factor: Annotated[int, typer.Argument(help="Signed 64-bit integer factor.")],
        unit: UnitOption = None,
    ) -> None:
        """Multiply a duration by an integer."""
        name = _unit_name(ctx, unit)
        _run(ctx, lambda: _components(_to_duration(value, name) * factor))

    @cli.command(context_settings=_NUMERIC_ARGS)
    def divide(
        ctx: typer.Context,
        value: Annotated[str, typer.Argument(help="Duration amount.")],
        divisor: Annotated[int, typer.Argument(help="Signed 64-bit integer divisor.")],
        unit: UnitOption = None,
    ) -> None:
        """Divide a duration by an integer; print quotient and remainder."""
        name = _unit_name(ctx, unit)

        def compute() -> dict[str, Any]:
            quotient, remainder = _to_duration(value, name).div_rem(divisor)
            return {"quotient": _components(quotient), "remainder": _components(remainder)}

        _run(ctx, compute)

    return cli


def main() -> None:
    """Console-script entry point."""
    build_cli()()
