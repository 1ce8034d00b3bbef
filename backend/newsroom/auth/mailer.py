import asyncio
import logging
import smtplib
from email.message import EmailMessage

from ..config import settings

logger = logging.getLogger(__name__)


def _build_reset_message(to: str, token: str) -> EmailMessage:
    link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"
    minutes = settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES

    message = EmailMessage()
    message["Subject"] = "Password reset"
    message["From"] = settings.MAIL_FROM
    message["To"] = to
    message.set_content(
        "You requested a password reset for your account.\n"
        f"Open the link below to choose a new password:\n\n{link}\n\n"
        f"This link expires in {minutes} minutes.\n"
        "If you did not request this, you can ignore this e-mail.\n"
    )
    message.add_alternative(
        f"<p>You requested a password reset for your account.</p>"
        f"<p><a href=\"{link}\">Reset password</a></p>"
        f"<p>This link expires in {minutes} minutes.</p>"
        f"<p>If you did not request this, you can ignore this e-mail.</p>",
        subtype="html",
    )
    return message


def _send(message: EmailMessage) -> None:
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as smtp:
        if settings.SMTP_STARTTLS:
            smtp.starttls()
        if settings.SMTP_USER:
            smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD or "")
        smtp.send_message(message)


async def send_password_reset_email(to: str, token: str) -> None:
    """재설정 링크 메일 발송. BackgroundTasks 에서 호출되므로 실패는 로그로만 남깁니다."""
    if not settings.MAIL_ENABLED:
        logger.info("Mail delivery disabled; skipping password reset e-mail to %s", to)
        return
    try:
        await asyncio.to_thread(_send, _build_reset_message(to, token))
        logger.info("Password reset e-mail sent to %s", to)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send password reset e-mail to {to}: {e}")
