"""Transactional email (password reset) over SMTP."""
import logging
import smtplib
from email.mime.text import MIMEText

from jobquest.core import config
from jobquest.core.errors import MailDeliveryError

logger = logging.getLogger(__name__)


def send_password_reset_email(to_email: str, reset_link: str) -> None:
    if not config.SMTP_HOST:
        logger.warning("SMTP_HOST not configured - password reset email not sent")
        raise MailDeliveryError("Password reset email is not configured")

    body = (
        "Someone asked to reset the password of your JobQuest account.\n\n"
        f"Follow this link to choose a new password:\n{reset_link}\n\n"
        "If this wasn't you, you can ignore this email."
    )
    msg = MIMEText(body, "plain", "utf-8")
    msg["Subject"] = "Reset your JobQuest password"
    msg["From"] = config.MAIL_FROM
    msg["To"] = to_email

    try:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=30) as server:
            server.starttls()
            if config.SMTP_USER and config.SMTP_PASSWORD:
                server.login(config.SMTP_USER, config.SMTP_PASSWORD)
            server.sendmail(config.MAIL_FROM, [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Password reset email failed: {e}", exc_info=True)
        raise MailDeliveryError("Failed to send password reset email") from e

    logger.info("Password reset email sent")
