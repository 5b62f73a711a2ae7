"""Transactional e-mail through Resend.

Used by the ``send-customer-email`` handler to deliver AI-drafted messages to
a business's customers.
"""

from __future__ import annotations

import html
import logging
from typing import Any

import resend

from bizlaunch.config import EMAIL_DEFAULT_FROM, EMAIL_DEFAULT_SENDER_NAME, get_resend_api_key
from bizlaunch.services.metrics import metrics

logger = logging.getLogger(__name__)

_HTML_TEMPLATE = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="white-space: pre-wrap; line-height: 1.6;">{body}</div>
  <hr style="margin-top: 30px; border: none; border-top: 1px solid #eee;" />
  <p style="color: #888; font-size: 12px; margin-top: 20px;">
    Sent via {sender}
  </p>
</div>
"""


class EmailDeliveryError(Exception):
    """Raised when the e-mail provider rejects or fails a send."""


def render_html(message: str, sender_name: str) -> str:
    body = html.escape(message).replace("\n", "<br>")
    return _HTML_TEMPLATE.format(body=body, sender=html.escape(sender_name))


class CustomerMailer:
    def send(
        self,
        to: str,
        subject: str,
        message: str,
        *,
        business_name: str | None = None,
        business_email: str | None = None,
    ) -> dict[str, Any]:
        """Send one e-mail and return the provider's response."""
        resend.api_key = get_resend_api_key()

        sender_name = business_name or EMAIL_DEFAULT_SENDER_NAME
        sender_email = business_email or EMAIL_DEFAULT_FROM
        params = {
            "from": f"{sender_name} <{sender_email}>",
            "to": [to],
            "subject": subject,
            "html": render_html(message, sender_name),
        }

        logger.info("Sending email to %s with subject: %s", to, subject)
        try:
            with metrics.track("resend", "send-customer-email"):
                response = resend.Emails.send(params)
        except Exception as exc:
            raise EmailDeliveryError(str(exc)) from exc

        logger.info("Email sent successfully: %s", response)
        return dict(response) if response else {}
