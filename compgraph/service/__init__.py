"""HTTP service exposing a project's component graph."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
