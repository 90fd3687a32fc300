import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional

from stockroom import config
from stockroom.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)


def _redact_email(email: str) -> str:
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


class Mailer:
    """Outbound mail over SMTP.

    When no SMTP host is configured the message is written to the log
    instead, and ``send`` returns a preview string the caller can show in
    development.
    """

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 15.0,
        from_address: str = "no-reply@example.com",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.use_tls = use_tls
        self.timeout = timeout
        self.from_address = from_address

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host)

    def send(self, to: str, subject: str, html: str, text: Optional[str] = None, preview: Optional[str] = None) -> Optional[str]:
        """Send one message. Returns ``preview`` in log-only mode, else None.

        Raises MailDeliveryError if the SMTP exchange fails. There is no retry.
        """
        if not self.is_configured:
            logger.info("Mail not configured; to=%s subject=%r body=%s", _redact_email(to), subject, (text or html)[:300])
            return preview

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to
        msg.set_content(text or "")
        msg.add_alternative(html, subtype="html")

        try:
            context = ssl.create_default_context()
            if self.use_tls:
                with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                    server.starttls(context=context)
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.send_message(msg)
            else:
                with smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, context=context, timeout=self.timeout) as server:
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Mail delivery failed; to=%s subject=%r error=%s", _redact_email(to), subject, e)
            raise MailDeliveryError() from e

        logger.info("Mail sent; to=%s subject=%r", _redact_email(to), subject)
        return None

    def send_password_reset(self, to: str, reset_link: str, expire_minutes: int) -> Optional[str]:
        html = (
            "<p>You requested a password reset.</p>"
            f'<p>Click <a href="{reset_link}">here</a> to reset your password. '
            f"Link expires in {expire_minutes} minutes.</p>"
        )
        text = (
            "You requested a password reset.\n"
            f"Open this link to reset your password: {reset_link}\n"
            f"The link expires in {expire_minutes} minutes.\n"
        )
        return self.send(to, "Password Reset Request", html, text=text, preview=reset_link)


_mailer = Mailer(
    smtp_host=config.SMTP_HOST,
    smtp_port=config.SMTP_PORT,
    smtp_user=config.SMTP_USER,
    smtp_password=config.SMTP_PASSWORD,
    use_tls=config.SMTP_USE_TLS,
    timeout=config.SMTP_TIMEOUT_SECONDS,
    from_address=config.MAIL_FROM,
)


def get_mailer() -> Mailer:
    return _mailer
