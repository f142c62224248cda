"""CLI interface for reviewroster.

This module provides a command-line interface for running the API server
and inspecting the roster database.
"""
import asyncio
import sys
from pathlib import Path

import click
import uvicorn

from . import __version__
from .core.config import ReviewRosterConfig, configure_logging, init_config


@click.group()
@click.version_option(version=__version__)
def cli():
    """reviewroster - reviewer assignment for team pull requests."""
    pass


@cli.command()
@click.option(
    "--config-path",
    "-c",
    type=click.Path(dir_okay=False),
    default="reviewroster.yaml",
    help="Path to configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Force overwrite existing config")
def init(config_path: str, force: bool):
    """Write a default configuration file."""
    config_file = Path(config_path)

    if config_file.exists() and not force:
        click.echo(f"Configuration file already exists: {config_path}")
        click.echo("Use --force to overwrite")
        return

    try:
        config = ReviewRosterConfig.create_default_config(config_file)

        click.echo(f"Created configuration file: {config_path}")
        click.echo("\nDefault configuration:")
        click.echo(f"  API Server: {config.api_host}:{config.api_port}")
        click.echo(f"  Database: {config.get_database_url()}")
        click.echo(f"  Reviewers per pull request: {config.reviewers_per_pull_request}")
        click.echo(f"\nEdit {config_path} to customize settings.")

    except Exception as e:
        click.echo(f"Error creating configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option("--host", help="Override API host")
@click.option("--port", type=int, help="Override API port")
def start(config: str, host: str, port: int):
    """Start the reviewroster API server."""
    try:
        app_config = init_config(config) if config else init_config()

        # Override with CLI options
        if host:
            app_config.api_host = host
        if port:
            app_config.api_port = port

        configure_logging(app_config)
        click.echo("Starting reviewroster...")
        click.echo(f"   API: http://{app_config.api_host}:{app_config.api_port}")
        click.echo("\nPress Ctrl+C to stop\n")

        uvicorn.run(
            "reviewroster.api:app",
            host=app_config.api_host,
            port=app_config.api_port,
            log_level=app_config.log_level.lower(),
        )

    except KeyboardInterrupt:
        click.echo("\n\nStopping reviewroster...")
    except Exception as e:
        click.echo(f"Error starting server: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
def status(config: str):
    """Show configuration and database row counts."""
    try:
        app_config = init_config(config) if config else init_config()

        click.echo("reviewroster Status")
        click.echo("=" * 50)
        click.echo(f"Configuration: {config or 'default'}")
        click.echo(f"Database URL: {app_config.get_database_url()}")
        click.echo(f"API Server: {app_config.api_host}:{app_config.api_port}")
        click.echo(f"Log Level: {app_config.log_level}")

        from .core.storage import PullRequestRepository, UserRepository, init_db

        db = init_db(app_config.get_database_url())

        async def get_counts():
            await db.create_tables()
            async with db.session() as session:
                pull_requests = await PullRequestRepository(session).count()
                active_users = await UserRepository(session).count_active()
            await db.close()
            return pull_requests, active_users

        pull_requests, active_users = asyncio.run(get_counts())
        click.echo("\nDatabase connection successful")
        click.echo(f"\nPull requests: {pull_requests}, active users: {active_users}")

    except Exception as e:
        click.echo(f"Error checking status: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
def stats(config: str):
    """Print reviewer load and pull request status distribution."""
    try:
        app_config = init_config(config) if config else init_config()

        from .core.stats import StatsAggregator
        from .core.storage import init_db

        db = init_db(app_config.get_database_url())

        async def get_stats():
            await db.create_tables()
            result = await StatsAggregator(
                db, top_reviewers_limit=app_config.top_reviewers_limit
            ).get_stats()
            await db.close()
            return result

        result = asyncio.run(get_stats())

        click.echo(f"Active users: {result.total_active_users}")
        click.echo("\nPull requests by status:")
        for stat in result.pr_status_distribution:
            click.echo(f"  {stat.status:<8} {stat.count}")
        click.echo("\nTop reviewers:")
        if not result.top_reviewers:
            click.echo("  (no assignments yet)")
        for stat in result.top_reviewers:
            click.echo(f"  {stat.reviewer_id:<20} {stat.assignment_count}")

    except Exception as e:
        click.echo(f"Error computing statistics: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
