"""Contact form delivery through the Resend HTTP API, or the log when no key is configured."""
import html
import logging
import re
from datetime import datetime, timezone
from typing import Optional

import httpx
from fastapi import HTTPException

from app.config import settings
from app.config.content_config import MESSAGES
from app.modules.contact.schemas import ContactRequest, ContactResponse

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SUBJECT_PREFIX = "【Appli Farm お問い合わせ】"
RESEND_TIMEOUT_SEC = 10.0


def validate_contact(contact: ContactRequest) -> ContactRequest:
    fields = [contact.name, contact.email, contact.subject, contact.message]
    if not all(value and value.strip() for value in fields):
        raise HTTPException(status_code=400, detail=MESSAGES["contact_missing_fields"])
    if not EMAIL_PATTERN.match(contact.email.strip()):
        raise HTTPException(status_code=400, detail=MESSAGES["contact_invalid_email"])
    return ContactRequest(
        name=contact.name.strip(),
        email=contact.email.strip(),
        subject=contact.subject.strip(),
        message=contact.message.strip(),
    )


def render_contact_html(contact: ContactRequest) -> str:
    e = html.escape
    return (
        "<h2>新しいお問い合わせがあります</h2>"
        f"<p><strong>お名前:</strong> {e(contact.name)}</p>"
        f"<p><strong>メールアドレス:</strong> {e(contact.email)}</p>"
        f"<p><strong>件名:</strong> {e(contact.subject)}</p>"
        "<p><strong>メッセージ:</strong></p>"
        f'<pre style="white-space: pre-wrap; word-wrap: break-word;">{e(contact.message)}</pre>'
    )


class ContactService:
    def __init__(self, api_key: Optional[str] = None, http_client: Optional[httpx.Client] = None):
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.http_client = http_client

    def submit(self, contact: ContactRequest) -> ContactResponse:
        contact = validate_contact(contact)
        if not self.api_key:
            logger.info(
                "Contact form submission (no email service configured): name=%s email=%s subject=%s message=%s at=%s",
                contact.name, contact.email, contact.subject, contact.message,
                datetime.now(timezone.utc).isoformat(),
            )
            return ContactResponse(
                success=True,
                message=MESSAGES["contact_accepted"],
                note=MESSAGES["contact_not_configured"],
            )
        self.send_email(contact)
        return ContactResponse(success=True, message=MESSAGES["contact_sent"])

    def send_email(self, contact: ContactRequest) -> None:
        payload = {
            "from": settings.contact_from_email,
            "to": settings.contact_to_email,
            "reply_to": contact.email,
            "subject": f"{SUBJECT_PREFIX}{contact.subject}",
            "html": render_contact_html(contact),
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            if self.http_client is not None:
                response = self.http_client.post(settings.resend_api_url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=RESEND_TIMEOUT_SEC) as client:
                    response = client.post(settings.resend_api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Resend error: {e}")
            raise HTTPException(status_code=500, detail=MESSAGES["contact_failed"])

        if response.status_code >= 400:
            logger.error("Resend API error: %s %s", response.status_code, response.text)
            raise HTTPException(status_code=500, detail=MESSAGES["contact_failed"])
        logger.info("Contact mail sent for %s", contact.email)
