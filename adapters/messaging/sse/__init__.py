"""Server-Sent Events (SSE) messaging adapter."""

from .service import SSEService  # noqa: F401
from .factory import get_sse_service  # noqa: F401
from .breakers import CircuitBreaker  # noqa: F401
