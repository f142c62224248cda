"""reviewroster core library - models, storage and the assignment engine."""
# Export main components
from . import config
from . import errors
from . import models
from . import schemas
from . import storage
from . import assignment
from . import roster
from . import stats

__all__ = [
    "config",
    "errors",
    "models",
    "schemas",
    "storage",
    "assignment",
    "roster",
    "stats",
]
