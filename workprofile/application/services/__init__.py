"""Application services."""

from workprofile.application.services.authorization_service import AuthorizationPolicy

__all__ = ["AuthorizationPolicy"]
