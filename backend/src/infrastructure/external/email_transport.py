"""
Email Transport Implementations
SMTP delivery for production, console logging for development
"""
import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from loguru import logger

from core.config import Settings
from core.exceptions import EmailDeliveryException
from application.services.notifications.interfaces import IEmailTransport


class SmtpEmailTransport(IEmailTransport):
    """SMTP transport; the blocking smtplib session runs in a worker thread"""

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        from_email: str,
        from_name: str = "TrackerPro",
        use_tls: bool = True,
        timeout: float = 20,
    ):
        """
        Initialize SMTP transport

        Args:
            host: SMTP server host
            port: SMTP server port
            username: SMTP login (skipped when empty)
            password: SMTP password
            from_email: Envelope and header sender
            from_name: Display name of the sender
            use_tls: Upgrade the connection with STARTTLS
            timeout: Socket timeout in seconds for the whole session
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, config: Settings) -> "SmtpEmailTransport":
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            from_email=config.sender_email,
            from_name=config.SMTP_FROM_NAME,
            use_tls=config.SMTP_USE_TLS,
            timeout=config.SMTP_TIMEOUT_SECONDS,
        )

    async def send(self, to: str, subject: str, body: str) -> None:
        message = self._build_message(to, subject, body)
        try:
            await asyncio.to_thread(self._deliver, to, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP delivery to {to} failed: {e}")
            raise EmailDeliveryException(to, str(e)) from e

        logger.info(f"Email sent to {to}")

    def _build_message(self, to: str, subject: str, body: str) -> MIMEMultipart:
        msg = MIMEMultipart()
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "html"))
        return msg

    def _deliver(self, to: str, message: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(message, from_addr=self.from_email, to_addrs=[to])


class ConsoleEmailTransport(IEmailTransport):
    """Development transport that only logs outgoing mail"""

    async def send(self, to: str, subject: str, body: str) -> None:
        logger.info(f"[console email] to={to} subject={subject!r}")
        logger.debug(body)


def build_email_transport(config: Settings) -> IEmailTransport:
    """Transport selected by ``EMAIL_BACKEND``"""
    if config.EMAIL_BACKEND == "console":
        return ConsoleEmailTransport()
    return SmtpEmailTransport.from_settings(config)
