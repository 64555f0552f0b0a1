"""
Application lifecycle core for a multi-tenant deployment platform.

Creates and destroys application records, manages the teams allowed to access
each application and provisions one bare git repository per application.
"""

__version__ = "0.1.0"
