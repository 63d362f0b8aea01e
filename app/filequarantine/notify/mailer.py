"""E-mail delivery of run reports.

Reports go out over SMTP when a server is configured, otherwise
through the local ``sendmail`` binary.
"""

import logging
import smtplib
import socket
import ssl
import subprocess
from datetime import datetime
from email.message import EmailMessage

from filequarantine.core.config import EmailConfig
from filequarantine.notify.base import Notifier
from filequarantine.notify.html import render_report_html
from filequarantine.quarantine.report import RunReport
from filequarantine.utils.shell import locate_command, pipe_to_command

logger = logging.getLogger(__name__)


class EmailNotifier(Notifier):
    """Sends the run report as an HTML e-mail.

    Attributes:
        _config: E-mail settings.
    """

    def __init__(self, config: EmailConfig) -> None:
        """Initialize the EmailNotifier.

        Args:
            config: E-mail settings (recipient, sender, transport).
        """
        self._config = config

    def deliver(self, report: RunReport) -> bool:
        """Render the report and send it.

        Args:
            report: The finished run report.

        Returns:
            True if the message was accepted by SMTP or sendmail.
        """
        message = self.build_message(report)
        logger.info("Sending report to %s", self._config.to)

        if self._config.smtp_server:
            return self._send_smtp(message)
        return self._send_local(message)

    def build_message(self, report: RunReport) -> EmailMessage:
        """Build the MIME message for a report.

        Args:
            report: The finished run report.

        Returns:
            EmailMessage with a plain-text fallback and an HTML body.
        """
        generated = report.generated_at or report.started_at
        subject = self._config.subject.format(
            date=generated.strftime("%Y-%m-%d"),
            hostname=socket.gethostname(),
        )

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self._config.effective_from
        message["To"] = self._config.to
        message.set_content(_plain_text_summary(report, generated))
        message.add_alternative(render_report_html(report), subtype="html")
        return message

    def _send_smtp(self, message: EmailMessage) -> bool:
        """Send through the configured SMTP server."""
        cfg = self._config
        try:
            with smtplib.SMTP(cfg.smtp_server, cfg.smtp_port, timeout=cfg.timeout_seconds) as smtp:
                if cfg.smtp_use_tls:
                    smtp.starttls(context=ssl.create_default_context())
                if cfg.smtp_user and cfg.smtp_password:
                    smtp.login(cfg.smtp_user, cfg.smtp_password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email via SMTP %s: %s", cfg.smtp_server, e)
            return False

        logger.info("Email sent successfully via SMTP")
        return True

    def _send_local(self, message: EmailMessage) -> bool:
        """Send through the local sendmail binary."""
        sendmail = locate_command("sendmail")
        if sendmail is None:
            logger.error("sendmail not found. Install an MTA or configure smtp_server.")
            return False

        try:
            result = pipe_to_command(
                [sendmail, "-t"], message.as_string(), timeout=self._config.timeout_seconds
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("Failed to run sendmail: %s", e)
            return False

        if not result.success:
            logger.error("sendmail failed: %s", result.stderr.strip() or result.returncode)
            return False

        logger.info("Email sent successfully via sendmail")
        return True


def _plain_text_summary(report: RunReport, generated: datetime) -> str:
    """Short text body for clients that do not render HTML."""
    lines = [
        f"File Quarantine Report - {generated.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Hostname: {report.context.hostname}",
        "",
        f"Files quarantined: {report.count_quarantined}",
        f"Files deleted: {report.count_deleted}",
    ]
    if report.context.truncate_logs:
        lines.append(f"Files truncated: {report.count_truncated}")
    if report.dry_run:
        lines.extend(["", "DRY-RUN MODE - no files were modified"])
    return "\n".join(lines)
