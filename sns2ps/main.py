import logging
import sys
from pathlib import Path

import click

from sns2ps.config import Settings
from sns2ps.exceptions import ConfigurationError, Sns2psError
from sns2ps.pipeline import MatchRequest, RegistrationPipeline

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def load_settings(**overrides: object) -> Settings:
    try:
        return Settings.from_env().with_overrides(**overrides)
    except ConfigurationError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Shoot 'n Score It to PractiScore registration exporter"""
    setup_logging(verbose)


@cli.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind")
@click.option("--port", type=int, default=None, help="Port (default: $PORT or 8080)")
@click.option(
    "--live/--dummy",
    "live_mode",
    default=None,
    help="Query Shoot 'n Score It or serve local dummy data (default: $LIVE_MODE)",
)
def serve(host, port, live_mode):
    """Run the HTTP service"""
    import uvicorn

    from sns2ps.api import create_app

    settings = load_settings(port=port, live_mode=live_mode)
    if settings.live_mode:
        logger.info("Running in live mode - will query Shoot 'n Score It website")
    else:
        logger.info("Running in dummy mode - will use local dummy data")
    logger.info(f"Starting up using port {settings.port}")

    uvicorn.run(create_app(settings), host=host, port=settings.port, log_level="info")


@cli.command()
@click.argument("match_id")
@click.option("--username", "-u", required=True, help="Shoot 'n Score It username")
@click.option(
    "--password",
    "-p",
    envvar="SNS_PASSWORD",
    prompt=True,
    hide_input=True,
    help="Shoot 'n Score It password (or $SNS_PASSWORD)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output CSV file (default: <Match_Name>.csv)",
)
@click.option("--live/--dummy", "live_mode", default=None)
def export(match_id, username, password, output, live_mode):
    """Export the registration of MATCH_ID as a PractiScore CSV"""
    settings = load_settings(live_mode=live_mode)
    pipeline = RegistrationPipeline.from_settings(settings)

    try:
        result = pipeline.run(MatchRequest.validated(match_id, username, password))
    except Sns2psError as e:
        logger.error(f"Export of match {match_id} failed: {e.message}")
        raise click.ClickException(str(e)) from e

    # Match names are remote data: keep only the final path component.
    path = output or Path(Path(result.filename).name)
    try:
        path.write_bytes(result.content)
    except OSError as e:
        logger.error(f"Could not write {path}: {e}")
        raise click.ClickException(f"Could not write {path}: {e}") from e
    click.echo(f"Wrote {result.row_count} competitors to {path}")


if __name__ == "__main__":
    cli()
