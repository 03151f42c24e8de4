"""Shared pytest fixtures for unit and integration tests."""

from .core import *  # noqa: F401,F403
from .services import *  # noqa: F401,F403
