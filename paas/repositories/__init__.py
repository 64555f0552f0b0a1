"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for the application and team
collections and translate store failures into paas.core.errors exceptions.
They convert ORM rows into the pydantic models of paas.schemas, so callers
never hold on to session-bound objects.
"""

from .apps import AppRepository  # noqa: F401
from .teams import TeamRepository  # noqa: F401
