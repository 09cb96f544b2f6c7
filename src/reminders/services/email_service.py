"""
EmailService: delivers composed reminder messages through Django's mail backend.
"""

import logging
import smtplib

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.utils import timezone

from reminders.exceptions import EmailDeliveryFailed
from reminders.models import Failure, Message

logger = logging.getLogger(__name__)


class EmailService:
    """Sends one message per call. A failed send is reported, never retried."""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout if timeout is not None else settings.EMAIL_TIMEOUT

    def send(self, message: Message) -> Failure | None:
        """
        Send a message.

        Returns:
            None on success, Failure(EmailDeliveryFailed) otherwise.
        """
        try:
            email = EmailMultiAlternatives(
                subject=message.subject,
                body=message.text_body,
                from_email=message.sender,
                to=[message.recipient],
                connection=get_connection(timeout=self.timeout),
            )
            email.attach_alternative(message.html_body, "text/html")
            sent = email.send()
        # ValueError covers BadHeaderError and addresses Django cannot sanitize
        except (smtplib.SMTPException, OSError, ValueError) as e:
            error = EmailDeliveryFailed(f"Sending to {message.recipient} failed: {e}")
            logger.error(str(error))
            return Failure(error)

        if not sent:
            error = EmailDeliveryFailed(f"Transport accepted no message for {message.recipient}")
            logger.error(str(error))
            return Failure(error)

        logger.info(
            f"Email sent to {message.recipient} at {timezone.now().isoformat()}: "
            f"{message.subject}"
        )
        return None
