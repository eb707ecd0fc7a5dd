"""``shopcore`` console script: run the API and manage the credential store."""

import asyncio

import click

from shopcore import __version__
from shopcore.core.config import Settings, get_settings
from shopcore.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="ShopCore")
def cli() -> None:
    """ShopCore - e-commerce backend with role-based access and Shopify sync.

    Settings are read from SHOPCORE_* environment variables and .env.
    """


ASGI_APP = "shopcore.infrastructure.api.app:app"


@cli.command()
@click.option("--host", type=str, default=None, help="Bind address (default: SHOPCORE_HOST)")
@click.option("--port", type=int, default=None, help="Bind port (default: SHOPCORE_PORT)")
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="uvicorn worker processes (default: SHOPCORE_WORKERS)",
)
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Auto-reload on code changes (default: on in development)",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Run the API under uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    if reload is None:
        reload = settings.is_development
    # uvicorn ignores workers when reloading
    worker_count = 1 if reload else (workers or settings.workers)
    host = host or settings.host
    port = port or settings.port

    get_logger(__name__).info(
        "Serving ShopCore",
        address=f"{host}:{port}",
        workers=worker_count,
        reload=reload,
        environment=settings.environment,
    )
    uvicorn.run(
        ASGI_APP,
        host=host,
        port=port,
        workers=worker_count,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command("init-db")
@click.option("--force", is_flag=True, help="Skip the confirmation prompt")
def init_db(force: bool) -> None:
    """Create the credential store tables and seed the role tiers."""
    from shopcore.infrastructure.persistence.database import Database, seed_default_roles

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo("Refusing to touch a production database without --force.", err=True)
        raise SystemExit(1)

    if not force:
        click.confirm(f"Create tables in {settings.database_url}?", abort=True, default=False)

    async def initialize() -> None:
        database = Database.from_settings(settings)
        database.ensure_sqlite_directory()
        try:
            await database.create_schema()
            async with database.session() as session:
                await seed_default_roles(session)
        finally:
            await database.dispose()

    asyncio.run(initialize())
    click.echo("Credential store ready.")


def _config_sections(settings: Settings) -> dict[str, dict[str, object]]:
    return {
        "service": {
            "environment": settings.environment,
            "debug": settings.debug,
            "bind": f"{settings.host}:{settings.port}",
            "workers": settings.workers,
        },
        "store": {"database": settings.database_url},
        "auth": {
            "token ttl (min)": settings.access_token_expire_minutes,
            "argon2 time cost": settings.hasher_time_cost,
            "login cooldown": f"{settings.login_cooldown_seconds}s",
            "api key header": settings.api_key_header,
        },
        "shopify": {
            "mode": "live" if settings.shopify_configured else "mock",
            "api version": settings.shopify_api_version,
            "webhooks": "on" if settings.shopify_webhook_secret else "off (no secret)",
        },
        "logging": {"level": settings.log_level, "format": settings.log_format},
    }


@cli.command()
def info() -> None:
    """Print the effective configuration."""
    settings = get_settings()
    click.echo(f"{settings.app_name} {settings.app_version}")
    for section, values in _config_sections(settings).items():
        click.echo(f"\n[{section}]")
        for label, value in values.items():
            click.echo(f"  {label:<18}{value}")


def main() -> None:
    """Entry point for the ``shopcore`` script and ``python -m shopcore``."""
    cli()


if __name__ == "__main__":
    main()
