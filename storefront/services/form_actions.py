"""Side effects of a successful form submit: email, webhook, redirect, custom."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from storefront.core.config import settings
from storefront.core.exceptions import FormActionError
from storefront.schemas.form import FieldValue, FormActions

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    async def send(self, to: str, subject: str, values: dict[str, FieldValue]) -> None: ...


class LoggingEmailSender:
    """Default sender: records the submission in the log instead of mailing it."""

    async def send(self, to: str, subject: str, values: dict[str, FieldValue]) -> None:
        logger.info("Form submission for %s (%s): %d field(s)", to, subject, len(values))


@dataclass(frozen=True)
class DispatchOutcome:
    action: str
    redirect_url: str | None = None


class FormActionDispatcher:
    def __init__(
        self,
        email_sender: EmailSender | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.email_sender = email_sender or LoggingEmailSender()
        self.timeout = timeout if timeout is not None else settings.FORM_WEBHOOK_TIMEOUT
        self.transport = transport

    async def dispatch(
        self, actions: FormActions, values: dict[str, FieldValue], *, form_title: str | None = None
    ) -> DispatchOutcome:
        """Run the submit action. Raises ``FormActionError`` when the side effect fails."""
        action = actions.on_submit
        if action == "email":
            if actions.email_to:
                await self._send_email(actions.email_to, form_title or "Form submission", values)
        elif action == "webhook":
            if actions.webhook_url:
                await self._post_webhook(actions.webhook_url, values)
        elif action == "redirect":
            if actions.redirect_url:
                return DispatchOutcome(action, redirect_url=actions.redirect_url)
        else:
            logger.debug("Custom submit action: nothing to dispatch server side")
        return DispatchOutcome(action)

    async def _send_email(self, to: str, subject: str, values: dict[str, FieldValue]) -> None:
        try:
            await self.email_sender.send(to, subject, values)
        except Exception as exc:
            raise FormActionError(f"Email delivery to {to} failed: {exc}") from exc

    async def _post_webhook(self, url: str, values: dict[str, FieldValue]) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(url, json=values)
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise FormActionError(f"Webhook {url} failed: {exc}") from exc
        logger.debug("Webhook %s accepted form submission (%d)", url, resp.status_code)
