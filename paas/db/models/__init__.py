"""
ORM models for the application and team collections.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .apps import AppRecord  # noqa: F401
from .teams import TeamRecord  # noqa: F401
