"""
Public Pydantic schemas used by repositories, services, and tests.
"""

from .apps import Application, AppState, Team, User, is_valid_app_name  # noqa: F401
