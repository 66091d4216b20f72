from __future__ import annotations


class WebhookError(Exception):
    """Base for every failure that ends a webhook request.

    The HTTP status lives on the class so the route maps errors in one place.
    """

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class VerificationError(WebhookError):
    """Signature, secret or envelope could not be trusted. Nothing was mutated."""


class WebhookValidationError(WebhookError):
    """A required field is missing from a verified payload.

    Work applied before the check (e.g. a subscription upsert) is kept.
    """


class UnhandledEventError(WebhookError):
    def __init__(self, event_type: str):
        super().__init__(f"Unhandled relevant event: {event_type}")
        self.event_type = event_type


class HandlerFailedError(WebhookError):
    def __init__(self, message: str = "Webhook handler failed. View your server logs."):
        super().__init__(message)


class NotificationError(WebhookError):
    status_code = 500

    def __init__(self, message: str = "Failed to send email."):
        super().__init__(message)
