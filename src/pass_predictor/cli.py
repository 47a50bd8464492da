"""
Command-line interface for the satellite pass predictor.

This module provides a CLI for listing upcoming passes and finding the
next pass over an observer from a TLE file.
"""

from typing import Optional
import json
import logging
import sys

import click

from .config import load_config
from .elements import load_element_sets, write_sample_element_sets
from .fallback import find_next_pass_with_fallback
from .observer import Observer
from .predictor import PassPredictor
from .utils import format_time_until, get_current_utc, parse_datetime, setup_logging

logger = logging.getLogger(__name__)


@click.group()
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Set logging level (default: from config, INFO)')
@click.option('--log-file', type=click.Path(), help='Log file path')
@click.option('--config', 'config_path', type=click.Path(),
              help='YAML configuration file')
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str], log_file: Optional[str],
         config_path: Optional[str]) -> None:
    """Satellite Pass Predictor - find satellite passes over a ground observer."""
    config = load_config(config_path)
    setup_logging(log_level or config.log_level, log_file)
    ctx.obj = {'config': config}
    logger.info("Starting Satellite Pass Predictor CLI")


@main.command()
@click.option('--tle', required=True, type=click.Path(exists=True),
              help='Path to TLE file (name, line 1, line 2 per satellite)')
@click.option('--lat', required=True, type=float, help='Observer latitude in degrees')
@click.option('--lon', required=True, type=float, help='Observer longitude in degrees')
@click.option('--min-elevation', default=None, type=float,
              help='Minimum elevation angle in degrees (default: 25.0)')
@click.option('--start-time', type=str,
              help='Start time (YYYY-MM-DD HH:MM:SS UTC, default: now)')
@click.option('--format', 'output_format', default='text',
              type=click.Choice(['text', 'json']),
              help='Output format')
@click.pass_context
def passes(
    ctx: click.Context,
    tle: str,
    lat: float,
    lon: float,
    min_elevation: Optional[float],
    start_time: Optional[str],
    output_format: str
) -> None:
    """List all passes in the next 24 hours, sorted by time."""

    try:
        start_dt = parse_datetime(start_time) if start_time else get_current_utc()
        observer = Observer(latitude=lat, longitude=lon)
        element_sets = load_element_sets(tle)

        predictor = PassPredictor(config=ctx.obj['config'])
        results = predictor.scan_passes(element_sets, observer, min_elevation, now=start_dt)

        if output_format == 'json':
            click.echo(json.dumps([p.to_dict() for p in results], indent=2))
            return

        click.echo(f"Passes over {observer} from {start_dt:%Y-%m-%d %H:%M:%S} UTC "
                   f"({len(element_sets)} satellites):")
        if not results:
            click.echo("No passes found in the next 24 hours")
        for p in results:
            click.echo(f"  {p}")

    except Exception as e:
        logger.error(f"Pass scan failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.option('--tle', required=True, type=click.Path(exists=True),
              help='Path to TLE file (name, line 1, line 2 per satellite)')
@click.option('--lat', required=True, type=float, help='Observer latitude in degrees')
@click.option('--lon', required=True, type=float, help='Observer longitude in degrees')
@click.option('--start-time', type=str,
              help='Start time (YYYY-MM-DD HH:MM:SS UTC, default: now)')
@click.option('--no-fallback', is_flag=True,
              help='Only search at the default threshold')
@click.option('--format', 'output_format', default='text',
              type=click.Choice(['text', 'json']),
              help='Output format')
@click.pass_context
def next_pass(
    ctx: click.Context,
    tle: str,
    lat: float,
    lon: float,
    start_time: Optional[str],
    no_fallback: bool,
    output_format: str
) -> None:
    """Find the next satellite pass over an observer."""

    try:
        start_dt = parse_datetime(start_time) if start_time else get_current_utc()
        observer = Observer(latitude=lat, longitude=lon)
        element_sets = load_element_sets(tle)

        config = ctx.obj['config']
        thresholds = [config.default_min_elevation_deg] if no_fallback else None
        result = find_next_pass_with_fallback(
            element_sets, observer,
            predictor=PassPredictor(config=config),
            thresholds=thresholds,
            now=start_dt,
        )

        if output_format == 'json':
            click.echo(json.dumps(result.to_dict(), indent=2))
            return

        if not result.found:
            click.echo("No satellite passes detected in the next 24 hours. Coverage unavailable.")
            return

        p = result.pass_
        click.echo(f"\nNext pass over {observer}:")
        click.echo(f"Satellite: {p.satellite_name}")
        click.echo(f"Time:      {p.time.strftime('%Y-%m-%d %H:%M:%S')} UTC "
                   f"(in {format_time_until(p.time, start_dt)})")
        click.echo(f"Elevation: {p.elevation_deg:.1f}° (threshold {result.min_elevation_deg}°)")
        click.echo(f"Azimuth:   {p.azimuth_deg:.1f}°")

    except Exception as e:
        logger.error(f"Next pass calculation failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.option('--output', required=True, type=click.Path(),
              help='Output TLE file path')
def create_sample_tle(output: str) -> None:
    """Create a sample TLE file with earth-observation satellites."""

    try:
        write_sample_element_sets(output)
        click.echo(f"Sample TLE file created: {output}")
        click.echo("Contains: LANDSAT 8, TERRA, AQUA, NOAA 18")

    except Exception as e:
        logger.error(f"Sample TLE creation failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
