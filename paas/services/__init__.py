"""
Service layer: access control, repository provisioning and the application
lifecycle orchestration built on top of them.
"""
