"""
Outgoing mail over SMTP.

smtplib is blocking, so delivery runs in the thread pool. Every send raises
``MailerNotConfigured`` when SMTP_HOST is unset and ``IntegrationError`` when
the server rejects or drops the message.
"""
import smtplib
from html import escape
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional

from starlette.concurrency import run_in_threadpool

from eventdekho.core.config import settings
from eventdekho.core.errors import IntegrationError, MailerNotConfigured
from eventdekho.core.logging import logger


def _deliver(message: EmailMessage) -> None:
    port = settings.SMTP_PORT
    if settings.SMTP_SECURE:
        smtp = smtplib.SMTP_SSL(settings.SMTP_HOST, port, timeout=15)
    else:
        smtp = smtplib.SMTP(settings.SMTP_HOST, port, timeout=15)
    with smtp:
        if not settings.SMTP_SECURE:
            smtp.starttls()
        if settings.SMTP_USER:
            smtp.login(settings.SMTP_USER, settings.SMTP_PASS or "")
        smtp.send_message(message)


def _esc(value) -> str:
    """HTML-escape a user-supplied value for a mail body; None renders empty."""
    return escape(str(value)) if value is not None else ""


def build_message(to: str, subject: str, html: Optional[str] = None, text: Optional[str] = None) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = formataddr((settings.MAIL_FROM_NAME, settings.SMTP_USER or "no-reply@eventdekho.local"))
    msg["To"] = to
    msg["Message-ID"] = make_msgid(domain="eventdekho")
    msg.set_content(text or "This message requires an HTML capable mail client.")
    if html:
        msg.add_alternative(html, subtype="html")
    return msg


async def send_email(to: str, subject: str, html: Optional[str] = None, text: Optional[str] = None) -> str:
    """
    Send one message and return its Message-ID.

    Raises:
        MailerNotConfigured: If SMTP_HOST is not set
        IntegrationError: If delivery fails
    """
    if not settings.smtp_configured:
        raise MailerNotConfigured()

    message = build_message(to, subject, html=html, text=text)
    try:
        await run_in_threadpool(_deliver, message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"SMTP delivery to {to} failed: {e}")
        raise IntegrationError("Failed to send email", str(e))

    logger.info(f"Email '{subject}' sent to {to}")
    return message["Message-ID"]


async def send_password_reset_email(to: str, token: str) -> str:
    reset_url = f"{settings.FRONTEND_URL}/reset-password?token={token}"
    html = f"""
        <p>You requested a password reset. Click the link below to set a new password:</p>
        <a href="{reset_url}">Reset Password</a>
        <p>This link will expire in 1 hour.</p>
        <p>If you didn't request this, please ignore this email.</p>
    """
    return await send_email(to, "Password Reset Request", html=html, text=f"Reset your password: {reset_url}")


async def send_verification_email(to: str, name: str) -> str:
    dashboard_url = f"{settings.FRONTEND_URL}/dashboard"
    html = f"""
        <h2>Congratulations, {_esc(name)}!</h2>
        <p>Your account has been <strong>verified</strong> by our administration team.</p>
        <p>You now have full access to create and publish events on {settings.MAIL_FROM_NAME}.</p>
        <a href="{dashboard_url}">Go to Dashboard</a>
    """
    return await send_email(to, f"Account Verified - {settings.MAIL_FROM_NAME}", html=html)


async def notify_verified(to: str, name: str) -> None:
    """Background-task wrapper: a failed verification email is only logged."""
    try:
        await send_verification_email(to, name)
    except IntegrationError as e:
        logger.warning(f"Verification email to {to} not sent: {e.message} ({e.error})")


async def send_registration_emails(organizer_email: str, event, participant) -> None:
    """
    Tell the organizer about a new registration, then confirm to the participant.

    Both sends are awaited; the first failure propagates.
    """
    if not organizer_email:
        raise IntegrationError("Failed to send email", "No organizer or admin address to notify")

    p = participant
    title = _esc(event.title)
    organizer_name = _esc(event.organizer_name)
    team = f"Yes ({_esc(p.team_name)})" if p.is_team else "Individual"
    organizer_html = f"""
        <h2>New Registration Received!</h2>
        <p>A new participant has registered for <strong>{title}</strong>.</p>
        <p><strong>Name:</strong> {_esc(p.name)}</p>
        <p><strong>Grade &amp; School:</strong> Grade {_esc(p.grade)}, {_esc(p.school_name)}</p>
        <p><strong>Location:</strong> {_esc(p.city)}</p>
        <p><strong>Email:</strong> {_esc(p.email)}</p>
        <p><strong>Phone:</strong> {_esc(p.phone)}</p>
        <p><strong>Role:</strong> {p.role.value}</p>
        <p><strong>Team:</strong> {team}</p>
        <p><strong>T-Shirt Size:</strong> {p.t_shirt_size.value}</p>
        <p><strong>Dietary Needs:</strong> {_esc(p.dietary_restrictions or "None")}</p>
        <p><strong>Emergency Contact:</strong> {_esc(p.emergency_contact)}</p>
        <p><strong>Parental Consent:</strong> {"Confirmed" if p.parental_consent else "Pending"}</p>
        <p><strong>School Informed:</strong> {"Yes" if p.school_authorization else "No"}</p>
    """
    await send_email(organizer_email, f"New Registration for Your Event: {event.title}", html=organizer_html)

    participant_html = f"""
        <h2>You're All Set!</h2>
        <p>Hi <strong>{_esc(p.name)}</strong>,</p>
        <p>Your registration for <strong>{title}</strong> is confirmed!</p>
        <p><strong>Organizer:</strong> {organizer_name}</p>
        <p><strong>Role:</strong> {p.role.value}</p>
        <p>Sent by {settings.MAIL_FROM_NAME} on behalf of {organizer_name}.</p>
    """
    await send_email(participant.email, f"Registration Confirmed! - {event.title}", html=participant_html)


async def send_test_email() -> str:
    if not settings.smtp_configured:
        raise MailerNotConfigured()
    if not settings.ADMIN_EMAIL:
        raise IntegrationError("Failed to send email", "ADMIN_EMAIL is not set")
    return await send_email(
        settings.ADMIN_EMAIL,
        f"{settings.MAIL_FROM_NAME} backend test email",
        text=f"This is a test email from the {settings.MAIL_FROM_NAME} backend.",
    )
