"""FastAPI dependency injection for shared resources.

Uses app.state to access singletons instead of module globals.
"""

from fastapi import Request


def get_registry(request: Request):
    """Provide MetricsRegistry singleton."""
    return request.app.state.registry


def get_chaos_controller(request: Request):
    """Provide the process-wide ChaosController."""
    return request.app.state.registry.chaos_flag
