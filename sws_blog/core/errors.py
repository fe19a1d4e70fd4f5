"""Error types raised by the service layer.

Routers translate these into HTTP responses through the handlers registered in
``sws_blog.server.exception_handlers``. Each error carries the HTTP status it
maps to, so services stay free of FastAPI imports.
"""

from __future__ import annotations

from typing import Any, Optional


class SwsBlogError(Exception):
    """Base error for all domain failures.

    Args:
        message: Human-readable error description.
        details: Optional structured payload for diagnosis.
    """

    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailedError(SwsBlogError):
    """Input passed schema validation but breaks a business rule."""

    status_code = 400


class NotFoundError(SwsBlogError):
    """A referenced record does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: str) -> None:
        super().__init__(f"{entity} {identifier} not found")
        self.entity = entity
        self.identifier = identifier


class ForbiddenError(SwsBlogError):
    """The caller does not own the requested resource."""

    status_code = 403


class ConflictError(SwsBlogError):
    """The write conflicts with existing state (duplicate slug, record in use)."""

    status_code = 409


class ConversationClosedError(ConflictError):
    """A message was sent to a conversation that is closed or archived."""

    def __init__(self, conversation_id: str, status: str) -> None:
        super().__init__(f"Conversation {conversation_id} is {status}")
        self.conversation_id = conversation_id
        self.conversation_status = status


class IntegrationNotConfiguredError(SwsBlogError):
    """An external integration is needed but its credentials are missing."""

    status_code = 503

    def __init__(self, integration: str) -> None:
        super().__init__(f"{integration} is not configured")
        self.integration = integration


class UpstreamServiceError(SwsBlogError):
    """An external API answered with an error.

    Args:
        message: Human-readable error description.
        upstream_status: HTTP status returned by the upstream service, if any.
        details: Raw upstream body for diagnosis.
    """

    status_code = 502

    def __init__(self, message: str, *, upstream_status: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message, details=details)
        self.upstream_status = upstream_status


class EmailDeliveryError(UpstreamServiceError):
    """The transactional email API rejected a message."""
