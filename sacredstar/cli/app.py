"""Primary Typer application for the SacredStar CLI."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer

from sacredstar.boot import configure_logging
from sacredstar.chart import ChartType, build_chart
from sacredstar.chart.builder import DEFAULT_POINTS
from sacredstar.config import Settings, load_settings
from sacredstar.ephemeris import SwissEphemeris
from sacredstar.exceptions import SacredStarError
from sacredstar.observability import ensure_metrics_registered
from sacredstar.transits import calculate
from sacredstar.vedic import build_dasha_tree
from sacredstar.zodiac import PointID

app = typer.Typer(help="SacredStar command line interface.")

_CHART_TYPES = ", ".join(item.value for item in ChartType)


def _parse_moment(value: str, zone_name: str) -> datetime:
    try:
        zone = ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise typer.BadParameter(f"Unknown time zone '{zone_name}'.") from exc
    try:
        moment = datetime.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid ISO-8601 timestamp '{value}'.") from exc
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def _parse_points(values: Optional[List[str]]) -> tuple[PointID, ...]:
    if not values:
        return DEFAULT_POINTS
    tokens: list[str] = []
    for entry in values:
        tokens.extend(token for token in entry.replace(",", " ").split() if token)
    try:
        return tuple(PointID(token.lower()) for token in dict.fromkeys(tokens))
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _settings(ctx: typer.Context, config: Optional[Path]) -> Settings:
    settings = load_settings(config)
    verbose = (ctx.obj or {}).get("verbose", 0)
    configure_logging(default=settings.observability.log_level, verbose=verbose)
    if settings.observability.metrics_enabled:
        ensure_metrics_registered()
    return settings


def _emit(payload: Any, output: Optional[Path]) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output is None:
        typer.echo(text)
        return
    try:
        output.write_text(text, encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem errors reported at runtime
        typer.secho(f"Unable to write JSON output: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    typer.secho(f"Wrote {output}", fg=typer.colors.GREEN, err=True)


def _fail(action: str, exc: Exception) -> typer.Exit:
    typer.secho(f"{action} failed: {exc}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


_CONFIG_OPTION = typer.Option(None, "--config", help="Settings YAML (defaults to SACREDSTAR_HOME).")
_ZONE_OPTION = typer.Option("UTC", "--tz", help="IANA zone for naive timestamps.")
_OUTPUT_OPTION = typer.Option(None, "--json", help="Write the JSON payload to this file.")


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Repeat for more detail."),
) -> None:
    """Configure logging before executing subcommands."""

    ctx.obj = {"verbose": verbose}
    configure_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("chart")
def chart(
    ctx: typer.Context,
    when: str = typer.Argument(..., metavar="ISO_TIME", help="Chart moment (ISO-8601)."),
    lon: float = typer.Option(..., "--lon", min=-180.0, max=180.0, help="Geographic longitude."),
    lat: float = typer.Option(..., "--lat", min=-90.0, max=90.0, help="Geographic latitude."),
    chart_type: str = typer.Option(
        ChartType.TROPICAL.value, "--type", help=f"Chart type ({_CHART_TYPES})."
    ),
    points: Optional[List[str]] = typer.Option(
        None, "--point", "--points", help="Points to place (repeatable)."
    ),
    zone: str = _ZONE_OPTION,
    config: Optional[Path] = _CONFIG_OPTION,
    json_output: Optional[Path] = _OUTPUT_OPTION,
) -> None:
    """Compute a whole-sign chart and print it as JSON."""

    moment = _parse_moment(when, zone)
    try:
        parsed_type = ChartType.parse(chart_type)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    selection = _parse_points(points)
    settings = _settings(ctx, config)

    ephemeris = SwissEphemeris.from_settings(settings)
    try:
        snapshot = build_chart(
            ephemeris,
            moment,
            lon,
            lat,
            parsed_type,
            selection,
            orbs=settings.aspects.orbs,
            lunation_orb=settings.aspects.lunation_orb,
        )
    except SacredStarError as exc:
        raise _fail("Chart computation", exc) from exc
    payload = snapshot.to_dict()
    if parsed_type.is_sidereal:
        payload["ayanamsa"] = ephemeris.ayanamsa(ephemeris.julian_day(moment))
    _emit(payload, json_output)


@app.command("dasha")
def dasha(
    ctx: typer.Context,
    birth: str = typer.Argument(..., metavar="ISO_TIME", help="Birth moment (ISO-8601)."),
    at: Optional[str] = typer.Option(
        None, "--at", help="Report the period running at this moment instead of the tree."
    ),
    zone: str = _ZONE_OPTION,
    config: Optional[Path] = _CONFIG_OPTION,
    json_output: Optional[Path] = _OUTPUT_OPTION,
) -> None:
    """Print the Vimshottari period tree, or the period active at ``--at``."""

    birth_moment = _parse_moment(birth, zone)
    settings = _settings(ctx, config)
    try:
        tree = build_dasha_tree(
            SwissEphemeris.from_settings(settings), birth_moment, settings=settings.dasha
        )
    except SacredStarError as exc:
        raise _fail("Dasha computation", exc) from exc

    if at is None:
        _emit(tree.to_dict(), json_output)
        return
    active = tree.lookup(_parse_moment(at, zone))
    if active is None:
        typer.secho(f"{at} is outside the dasha tree.", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(1)
    _emit(active.to_dict(), json_output)


@app.command("transits")
def transits(
    ctx: typer.Context,
    when: str = typer.Argument(..., metavar="ISO_TIME", help="Transit moment (ISO-8601)."),
    zone: str = _ZONE_OPTION,
    config: Optional[Path] = _CONFIG_OPTION,
    json_output: Optional[Path] = _OUTPUT_OPTION,
) -> None:
    """List ingress, aspect and lunation transits running at a moment."""

    moment = _parse_moment(when, zone)
    settings = _settings(ctx, config)
    try:
        found = calculate(
            SwissEphemeris.from_settings(settings),
            moment,
            search=settings.search,
            aspects=settings.aspects,
        )
    except SacredStarError as exc:
        raise _fail("Transit computation", exc) from exc
    _emit([item.to_dict() for item in found], json_output)


__all__ = ["app"]
