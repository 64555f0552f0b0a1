"""
Core utilities shared by every layer.

This package provides:
- Platform-level settings (separate from DB settings)
- Logging configuration with request/application context
- The error taxonomy raised by repositories and services
"""
