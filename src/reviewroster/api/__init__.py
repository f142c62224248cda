"""HTTP transport for reviewroster."""
from .app import create_app, init_app_state

# Instance used by ``uvicorn reviewroster.api:app``
app = create_app()

__all__ = ["app", "create_app", "init_app_state"]
