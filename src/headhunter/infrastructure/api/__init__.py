"""Game API fetch engine"""

from .client import ApiClient
from .context import ExecutionContext
from .endpoints import Endpoints
from .retry import RetryPolicy

__all__ = ["ApiClient", "Endpoints", "ExecutionContext", "RetryPolicy"]
