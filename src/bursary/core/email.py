"""
Email Service using Resend

Delivers account invitation emails. Each send is retried a bounded number
of times with linear backoff; callers only see the final outcome.
"""

import asyncio
import logging
from html import escape

import resend

from bursary.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key

_STYLE = """
        body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
        .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
        .header { color: #14532d; margin-bottom: 24px; }
        .button { display: inline-block; background-color: #14532d; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }
        .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
"""


async def _deliver(to_email: str, subject: str, html_content: str) -> None:
    params: resend.Emails.SendParams = {
        "from": settings.email_from,
        "to": [to_email],
        "subject": subject,
        "html": html_content,
    }
    # Run sync Resend call in thread pool to avoid blocking event loop
    email = await asyncio.to_thread(resend.Emails.send, params)
    logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
    max_retries: int | None = None,
) -> bool:
    """
    Send an email using Resend, retrying with linear backoff.

    Attempt ``n`` (zero-based) that fails is followed by a sleep of
    ``n + 1`` seconds before the next one.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email
        max_retries: Attempts before giving up (``EMAIL_MAX_RETRIES`` by default)

    Returns:
        True if the email was sent, False once every attempt has failed
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    attempts = max_retries or settings.email_max_retries
    for attempt in range(attempts):
        try:
            await _deliver(to_email, subject, html_content)
            return True
        except Exception as e:
            logger.warning(
                f"Failed to send email to {to_email} (attempt {attempt + 1} of {attempts}): {e}"
            )
            if attempt + 1 < attempts:
                await asyncio.sleep(attempt + 1)

    logger.error(f"Giving up on email to {to_email} after {attempts} attempts")
    return False


def _invitation_html(
    greeting_name: str,
    intro: str,
    activation_url: str,
    extra: str = "",
) -> str:
    expiry_hours = settings.invitation_expiry_hours
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>{_STYLE}</style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">Activate Your Account</h1>

            <p>Hello {greeting_name},</p>

            <p>{intro}</p>

            {extra}

            <a href="{activation_url}" class="button">Activate Account</a>

            <p>Or copy and paste this link into your browser:</p>
            <p style="word-break: break-all; color: #3b82f6;">{activation_url}</p>

            <p><strong>This link expires in {expiry_hours} hours.</strong></p>

            <div class="footer">
                <p>If you did not expect this email, you can safely ignore it.</p>
                <p>Bursary Portal</p>
            </div>
        </div>
    </body>
    </html>
    """


async def send_student_invitation(to_email: str, student_name: str, token: str) -> bool:
    """Send the activation link to a newly registered student."""
    safe_name = escape(student_name)
    activation_url = f"{settings.frontend_url}/students/activate/{token}"
    html_content = _invitation_html(
        safe_name,
        "Thank you for registering on the Bursary Portal. "
        "Activate your account to start applying for bursaries.",
        activation_url,
    )
    return await send_email(
        to_email=to_email,
        subject="Activate your Bursary Portal account",
        html_content=html_content,
    )


async def send_user_invitation(to_email: str, username: str, user_name: str, token: str) -> bool:
    """Send the activation link to a newly registered portal user."""
    activation_url = f"{settings.frontend_url}/users/activate/{token}"
    html_content = _invitation_html(
        escape(user_name),
        f"Your Bursary Portal account <strong>{escape(username)}</strong> has been created. "
        "Activate it to sign in.",
        activation_url,
    )
    return await send_email(
        to_email=to_email,
        subject="Activate your Bursary Portal account",
        html_content=html_content,
    )


async def send_admin_invitation(
    to_email: str,
    admin_name: str,
    role_name: str,
    token: str,
    temporary_password: str | None = None,
) -> bool:
    """
    Send the activation link to a new admin.

    When the account was created without a password the generated one is
    included so the admin can log in after activating.
    """
    safe_name = escape(admin_name)
    safe_role = escape(role_name)
    activation_url = f"{settings.frontend_url}/admins/activate/{token}"

    extra = ""
    if temporary_password:
        extra = (
            "<p>Your temporary password is "
            f"<strong>{escape(temporary_password)}</strong>. "
            "You will be asked to change it on first login.</p>"
        )

    html_content = _invitation_html(
        safe_name,
        f"An administrator account with the <strong>{safe_role}</strong> role "
        "has been created for you on the Bursary Portal.",
        activation_url,
        extra,
    )
    return await send_email(
        to_email=to_email,
        subject="Your Bursary Portal administrator account",
        html_content=html_content,
    )
