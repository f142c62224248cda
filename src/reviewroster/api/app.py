"""FastAPI app factory"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .. import __version__
from ..core.assignment import AssignmentEngine, CandidateSelector
from ..core.config import ReviewRosterConfig, configure_logging, get_config
from ..core.roster import RosterService
from ..core.stats import StatsAggregator
from ..core.storage.database import Database, init_db
from .errors import register_exception_handlers
from .middleware import RequestLoggingMiddleware, RequestTimeoutMiddleware

logger = logging.getLogger(__name__)


async def init_app_state(app: FastAPI, db: Optional[Database] = None) -> Database:
    """Open the database and wire the services into ``app.state``.

    Args:
        app: Application whose state is populated
        db: Existing database to use instead of opening one from config

    Returns:
        The database the services are bound to
    """
    config: ReviewRosterConfig = app.state.config
    if db is None:
        db = init_db(
            config.get_database_url(),
            echo=config.echo_sql,
            busy_timeout=config.sqlite_busy_timeout,
        )
    await db.create_tables()

    app.state.db = db
    app.state.engine = AssignmentEngine(
        db,
        selector=CandidateSelector(seed=config.selection_seed),
        reviewers_per_pull_request=config.reviewers_per_pull_request,
    )
    app.state.roster = RosterService(db)
    app.state.stats = StatsAggregator(db, top_reviewers_limit=config.top_reviewers_limit)
    return db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    configure_logging(app.state.config)
    db = await init_app_state(app)
    logger.info("reviewroster API started")

    yield

    # Shutdown
    await db.close()
    logger.info("reviewroster API stopped")


def create_app(config: Optional[ReviewRosterConfig] = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Configuration to use; defaults to the global configuration

    Returns:
        Configured FastAPI application instance
    """
    config = config or get_config()

    app = FastAPI(
        title="reviewroster API",
        description="Reviewer assignment for team pull requests",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(RequestTimeoutMiddleware, timeout=config.request_timeout)
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    # Register routes
    from .routes import pull_requests, stats, teams, users

    app.include_router(teams.router, tags=["teams"])
    app.include_router(users.router, tags=["users"])
    app.include_router(pull_requests.router, tags=["pull_requests"])
    app.include_router(stats.router, tags=["stats"])

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "service": "reviewroster"}

    return app
