"""
startupconnect.errors — Domain & Store Error Hierarchy
========================================================

Every failure a service can report is a :class:`StartupConnectError`
subclass carrying a stable ``code`` and the HTTP status the API maps it to.

Domain-rule violations are raised *before* any mutation, so a rejected
operation never leaves partial state behind.  :class:`StoreUnavailable`
wraps failures of the underlying database; nothing in this package retries
them.
"""

from __future__ import annotations


class StartupConnectError(Exception):
    """Base class for every error raised by the service layer."""

    code = "error"
    http_status = 400

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__doc__ or self.code
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class FieldError(StartupConnectError):
    """Validation failure pinned to a single input field."""

    def __init__(self, field: str, detail: str) -> None:
        self.field = field
        self.detail = detail
        super().__init__(f"{field}: {detail}")

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["field"] = self.field
        body["error"]["detail"] = self.detail
        return body


# ---------------------------------------------------------------------------
# Relationship graph
# ---------------------------------------------------------------------------
class AlreadyConnected(StartupConnectError):
    """The two users are already connected."""
    code = "already_connected"
    http_status = 409


class RequestAlreadyPending(StartupConnectError):
    """A connection request between these users is already pending."""
    code = "request_already_pending"
    http_status = 409


class NoPendingRequest(StartupConnectError):
    """There is no pending request from that user."""
    code = "no_pending_request"
    http_status = 409


class SelfConnection(StartupConnectError):
    """Users cannot connect with themselves."""
    code = "self_connection"
    http_status = 400


class NotConnected(StartupConnectError):
    """This action requires the two users to be connected."""
    code = "not_connected"
    http_status = 403


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------
class EmptyComment(StartupConnectError):
    """Comment text cannot be empty."""
    code = "empty_comment"
    http_status = 400


class EmptyMessage(StartupConnectError):
    """Message text cannot be empty."""
    code = "empty_message"
    http_status = 400


class InvalidPost(FieldError):
    code = "invalid_post"


class InvalidProfile(FieldError):
    code = "invalid_profile"


class InvalidCommunity(FieldError):
    code = "invalid_community"


class EmailTaken(StartupConnectError):
    """A user with this email already exists."""
    code = "email_taken"
    http_status = 409


# ---------------------------------------------------------------------------
# Lookups & access
# ---------------------------------------------------------------------------
class NotFound(StartupConnectError):
    code = "not_found"
    http_status = 404


class UserNotFound(NotFound):
    """User not found."""
    code = "user_not_found"


class PostNotFound(NotFound):
    """Post not found."""
    code = "post_not_found"


class CommunityNotFound(NotFound):
    """Community not found."""
    code = "community_not_found"


class ChatNotFound(NotFound):
    """Chat not found."""
    code = "chat_not_found"


class NotAParticipant(StartupConnectError):
    """You are not a participant of this chat."""
    code = "not_a_participant"
    http_status = 403


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
class StoreUnavailable(StartupConnectError):
    """The data store could not complete the request."""
    code = "store_unavailable"
    http_status = 503


class WriteConflict(StoreUnavailable):
    """The record changed while this request was writing it; try again."""
    code = "write_conflict"
    http_status = 409
