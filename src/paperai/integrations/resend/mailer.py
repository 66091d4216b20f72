from __future__ import annotations

from typing import Any, Optional, Protocol

import requests

from paperai.core.config import settings

RESEND_API_URL = "https://api.resend.com/emails"


class Mailer(Protocol):
    def send_email(self, *, from_: str, to: str, subject: str, html: str) -> dict[str, Any]:
        ...


class ResendMailer:
    def __init__(self, api_key: Optional[str], *, timeout: int = 10):
        self.api_key = api_key
        self.timeout = timeout

    def send_email(self, *, from_: str, to: str, subject: str, html: str) -> dict[str, Any]:
        """
        Resend REST API로 전송하고 delivery receipt(JSON)를 반환한다.
        """
        if not self.api_key:
            raise RuntimeError("RESEND_API_KEY is not set")

        resp = requests.post(
            RESEND_API_URL,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={"from": from_, "to": [to], "subject": subject, "html": html},
            timeout=self.timeout,
        )
        if resp.status_code >= 400:
            raise RuntimeError(f"Resend send failed: {resp.status_code} {resp.text}")

        return resp.json()


def default_mailer() -> ResendMailer:
    key = settings.resend_api_key
    return ResendMailer(key.get_secret_value() if key else None)


class RecordingMailer:
    def __init__(self, *, fail_with: Optional[Exception] = None):
        self.fail_with = fail_with
        self.sent: list[dict[str, str]] = []

    def send_email(self, *, from_: str, to: str, subject: str, html: str) -> dict[str, Any]:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"from": from_, "to": to, "subject": subject, "html": html})
        return {"id": f"email_{len(self.sent)}"}
