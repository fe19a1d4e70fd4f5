"""
Live chat email notifications.

Sends the "new live chat" / "chat reopened" email to the site owner through
the SendGrid v3 mail/send REST API. Delivery problems are logged and never
propagate to the chat request that triggered them.
"""

from __future__ import annotations

import html
import logging
from typing import Optional

import httpx

from sws_blog.core.errors import EmailDeliveryError, IntegrationNotConfiguredError
from sws_blog.server.core.config import SendGridConfig, SiteConfig

DEFAULT_CONVERSATION_TITLE = "Direct conversation"


class SendGridClient:
    """
    Thin async HTTP client for the SendGrid mail/send endpoint.

    Only single-recipient HTML messages are supported.
    """

    def __init__(
        self,
        config: SendGridConfig,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    @property
    def configured(self) -> bool:
        return bool(self.config.api_key)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    async def send_html(self, to: str, subject: str, html_content: str) -> None:
        if not self.configured:
            raise IntegrationNotConfiguredError("SendGrid")
        body = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.config.from_email, "name": self.config.from_name},
            "subject": subject,
            "content": [{"type": "text/html", "value": html_content}],
        }
        self._logger.debug("SendGridClient.send_html: POST %s to=%s", self.config.api_url, to)
        try:
            r = await self._client.post(self.config.api_url, headers=self._headers(), json=body)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EmailDeliveryError(
                f"SendGrid API error: {e.response.status_code} - {e.response.text}",
                upstream_status=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"SendGrid request failed: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()


def build_notification_email(
    *,
    conversation_id: str,
    visitor_id: str,
    site_url: str,
    post_title: Optional[str] = None,
    source_url: Optional[str] = None,
    is_reopen: bool = False,
) -> tuple[str, str]:
    """Subject and HTML body of a live chat notification. All values are HTML-escaped."""
    admin_url = html.escape(f"{site_url.rstrip('/')}/admin/live-chat?conversation={conversation_id}")
    safe_visitor_id = html.escape(visitor_id[:8])
    safe_post_title = html.escape(post_title) if post_title else None
    safe_source_url = html.escape(source_url) if source_url else None

    subject_prefix = "Chat Reopened" if is_reopen else "New Live Chat"
    heading = "Live Chat Reopened" if is_reopen else "New Live Chat Started"
    intro = (
        "A visitor has reopened a previously closed chat conversation."
        if is_reopen
        else "A visitor has started a new chat conversation."
    )
    subject = f"{subject_prefix}: {safe_post_title or DEFAULT_CONVERSATION_TITLE}"

    details = [f'<p style="margin: 0 0 8px 0; color: #4a4a4a;"><strong>Visitor ID:</strong> {safe_visitor_id}...</p>']
    if safe_post_title:
        details.append(
            f'<p style="margin: 0 0 8px 0; color: #4a4a4a;"><strong>From article:</strong> {safe_post_title}</p>'
        )
    if safe_source_url:
        details.append(
            '<p style="margin: 0; color: #4a4a4a;"><strong>Source URL:</strong> '
            f'<a href="{safe_source_url}" style="color: #0070f3;">{safe_source_url}</a></p>'
        )

    body = f"""
<div style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2 style="color: #1a1a1a; margin-bottom: 20px;">{heading}</h2>
  <p style="color: #4a4a4a; font-size: 16px; line-height: 1.5;">{intro}</p>
  <div style="background-color: #f5f5f5; border-radius: 8px; padding: 16px; margin: 20px 0;">
    {"".join(details)}
  </div>
  <p style="margin-top: 24px;">
    <a href="{admin_url}" style="background-color: #0070f3; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;">Open Conversation</a>
  </p>
  <p style="color: #888; font-size: 12px; margin-top: 32px;">This notification was sent from your website's live chat system.</p>
</div>
"""
    return subject, body


class LiveChatNotifier:
    """Emails the site owner when a visitor starts or reopens a chat."""

    def __init__(self, email_client: SendGridClient, site: SiteConfig) -> None:
        self.email_client = email_client
        self.site = site
        self._logger = logging.getLogger(__name__)

    async def notify(
        self,
        conversation_id: str,
        visitor_id: str,
        post_title: Optional[str] = None,
        source_url: Optional[str] = None,
        is_reopen: bool = False,
    ) -> bool:
        """Send the notification email. Returns whether an email was sent; never raises."""
        self._logger.info(
            f"Live chat notify: conversation={conversation_id} reopen={is_reopen} post_title={post_title!r}"
        )
        if not self.email_client.configured:
            self._logger.info("No SENDGRID_API_KEY configured, skipping email notification")
            return False
        to_email = self.email_client.config.notification_email
        if not to_email:
            self._logger.warning("LIVECHAT_NOTIFICATION_EMAIL not configured, skipping email notification")
            return False

        subject, body = build_notification_email(
            conversation_id=conversation_id,
            visitor_id=visitor_id,
            site_url=self.site.url,
            post_title=post_title,
            source_url=source_url,
            is_reopen=is_reopen,
        )
        try:
            await self.email_client.send_html(to_email, subject, body)
        except EmailDeliveryError as e:
            self._logger.error(f"Live chat email notification error: {e}")
            return False
        self._logger.info(f"Live chat notification sent to {to_email}")
        return True
