"""
Command Line Interface for dockinfo.
"""
import json
import logging

import click
from dotenv import load_dotenv

from ..API.http_server import create_app, serve as run_server
from ..CACHE.refresher import Refresher
from ..CACHE.snapshot_cache import SnapshotCache
from ..MODELS.settings import LogLevel
from ..PARSERS.settings_parser import SettingsParser
from ..PROVIDERS.docker_provider import DockerInventoryProvider
from ..SERVICES.lookup_service import LookupService
from ..errors import ConfigError, ContainerNotFound, ProviderUnavailable

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def configure_logging(level: LogLevel) -> None:
    """
    Sets the process wide log level.
    """
    logging.basicConfig(
        level=LOG_LEVELS[level],
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(LOG_LEVELS[level])


def get_lookup(ctx) -> LookupService:
    """
    Returns the lookup service for this invocation, building it on first use.
    A provider placed in ``ctx.obj['provider']`` is used instead of Docker.
    The provider is closed when the command finishes.
    """
    obj = ctx.obj
    if 'lookup' not in obj:
        settings = obj['settings']
        provider = obj.get('provider')
        if provider is None:
            try:
                provider = DockerInventoryProvider.from_settings(settings)
            except ProviderUnavailable as e:
                click.echo(f"Error: {e}", err=True)
                ctx.exit(2)
        ctx.call_on_close(provider.close)
        cache = SnapshotCache(Refresher(provider), timeout_ms=settings.cache_timeout)
        obj['lookup'] = LookupService(cache)
    return obj['lookup']


@click.group()
@click.option('--config', '-c', 'config_file', type=click.Path(dir_okay=False), default=None,
              envvar='DOCKINFO_CONFIG', help='YAML settings file')
@click.option('--loglevel', default=None, envvar='DOCKINFO_LOGLEVEL',
              help='debug, info, warning, error')
@click.option('--cache-timeout', type=int, default=None, envvar='DOCKINFO_CACHE_TIMEOUT',
              help='Cache lifespan in milliseconds. -1 disables cache. defaults to -1')
@click.option('--docker-url', default=None, envvar='DOCKINFO_DOCKER_URL',
              help='Docker Engine URL, defaults to DOCKER_HOST')
@click.option('--docker-api-version', default=None, envvar='DOCKINFO_DOCKER_API_VERSION',
              help='Docker Engine API version')
@click.option('--docker-timeout', type=float, default=None, envvar='DOCKINFO_DOCKER_TIMEOUT',
              help='Seconds before a Docker API call is abandoned')
@click.pass_context
def cli(ctx, config_file, loglevel, cache_timeout, docker_url, docker_api_version, docker_timeout):
    """
    dockinfo - Docker container metadata lookup.

    Serves the labels, addresses and ports of running containers,
    looked up by container id or by the caller's IP.
    """
    ctx.ensure_object(dict)
    overrides = {
        'log_level': loglevel,
        'cache_timeout': cache_timeout,
        'docker_url': docker_url,
        'docker_api_version': docker_api_version,
        'docker_timeout': docker_timeout,
    }
    try:
        settings = SettingsParser().parse(config_file, overrides)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    configure_logging(settings.log_level)
    ctx.obj['settings'] = settings


@cli.command()
@click.option('--host', default=None, envvar='DOCKINFO_HOST', help='Address to bind')
@click.option('--port', '-p', type=click.IntRange(1, 65535), default=None,
              envvar='DOCKINFO_PORT', help='Port to listen on')
@click.pass_context
def serve(ctx, host, port):
    """Run the HTTP lookup server."""
    settings = ctx.obj['settings']
    updates = {k: v for k, v in (('host', host), ('port', port)) if v is not None}
    if updates:
        settings = settings.model_copy(update=updates)

    logger.info("Starting Docker Info...")
    app = create_app(get_lookup(ctx), settings)
    run_server(app, settings)


def _print_record(ctx, find, query):
    try:
        record = find(query)
    except ContainerNotFound as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    except ProviderUnavailable as e:
        click.echo(f"Error: containers info could not be loaded: {e}", err=True)
        ctx.exit(2)
    click.echo(json.dumps(record.to_flat(), indent=2))


@cli.command()
@click.argument('container_id')
@click.pass_context
def lookup(ctx, container_id):
    """Print the info of a container by full or short id."""
    _print_record(ctx, get_lookup(ctx).by_key, container_id)


@cli.command()
@click.argument('address')
@click.pass_context
def whois(ctx, address):
    """Print the info of the container owning an IP address."""
    _print_record(ctx, get_lookup(ctx).by_address, address)


def main():
    """
    Main entry point for the CLI.
    """
    load_dotenv()
    cli(obj={})


if __name__ == '__main__':
    main()
