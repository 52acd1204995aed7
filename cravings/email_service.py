"""EmailJS client for delivering grocery lists.

Uses the EmailJS REST API with the account's private access token, which is
the server-side equivalent of the browser SDK.
"""

import logging

import requests

from .config import get_settings

logger = logging.getLogger(__name__)

EMAILJS_SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"


class EmailNotConfiguredError(Exception):
    """Raised when EmailJS credentials are missing."""

    pass


class EmailDeliveryError(Exception):
    """Raised when EmailJS rejects or fails a send."""

    pass


def is_configured() -> bool:
    """Check if EmailJS credentials are configured."""
    try:
        return get_settings().email_configured
    except Exception:
        return False


def send_grocery_list_email(to_email: str, grocery_list: str, recipe_name: str) -> None:
    """Send a grocery list to one recipient.

    Raises:
        EmailNotConfiguredError: If EmailJS credentials are missing.
        EmailDeliveryError: If the EmailJS API call fails.
    """
    settings = get_settings()
    if not settings.email_configured:
        raise EmailNotConfiguredError("EmailJS configuration is missing")

    payload = {
        "service_id": settings.emailjs_service_id,
        "template_id": settings.emailjs_template_id,
        "user_id": settings.emailjs_public_key,
        "accessToken": settings.emailjs_private_key,
        "template_params": {
            "to_email": to_email,
            "grocery_list": grocery_list,
            "recipe_name": recipe_name,
        },
    }

    try:
        response = requests.post(
            EMAILJS_SEND_URL,
            json=payload,
            timeout=settings.request_timeout,
        )
        response.raise_for_status()

    except requests.exceptions.HTTPError as e:
        logger.error(f"EmailJS API error: {e}")
        if e.response is not None:
            logger.error(f"Response body: {e.response.text}")
        raise EmailDeliveryError(f"EmailJS rejected the email: {e}") from e

    except requests.exceptions.RequestException as e:
        logger.error(f"EmailJS request failed: {e}")
        raise EmailDeliveryError(f"EmailJS request failed: {e}") from e

    logger.info(f"Sent '{recipe_name}' email to {to_email}")
