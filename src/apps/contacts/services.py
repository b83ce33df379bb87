"""Contact app services."""

import logging

from asgiref.sync import sync_to_async
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from .models import Contact

logger = logging.getLogger(__name__)


def _build_message(submission: Contact, recipients: list[str]) -> EmailMultiAlternatives:
    submitted = timezone.localtime(submission.created_at)
    subject = f"New Contact Form Submission from {submission.name}"

    text_body = (
        f"New contact form submission received:\n\n"
        f"Name: {submission.name}\n"
        f"Email: {submission.email}\n"
        f"Submitted: {submitted:%Y-%m-%d %H:%M}\n\n"
        f"Message:\n{submission.message}\n\n"
        f"---\nThis email was sent from the contact form on {settings.SITE_URL}\n"
    )
    html_body = render_to_string(
        "emails/contact_notification.html",
        {"submission": submission, "submitted": submitted, "site_url": settings.SITE_URL},
    )

    msg = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=recipients,
        reply_to=[f"{submission.name} <{submission.email}>"],
    )
    msg.attach_alternative(html_body, "text/html")
    return msg


async def send_contact_notification(submission: Contact) -> bool:
    """
    Email the site owner about a new submission.

    Returns True when the message was handed to the mail backend. Failures are
    logged and reported as False so the submission itself still succeeds.
    """
    recipients: list[str] = getattr(settings, "CONTACT_NOTIFICATION_EMAILS", [])

    if not recipients:
        logger.warning("No CONTACT_NOTIFICATION_EMAILS configured, skipping notification.")
        return False

    try:
        msg = _build_message(submission, recipients)
        await sync_to_async(msg.send)(fail_silently=False)
    except Exception:
        logger.exception("Failed to send contact notification for submission %s", submission.pk)
        return False

    logger.info("Contact notification sent to %s for submission %s", recipients, submission.pk)
    return True
