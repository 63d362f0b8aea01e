"""Report rendering and delivery."""

from filequarantine.notify.base import Notifier
from filequarantine.notify.html import render_report_html
from filequarantine.notify.mailer import EmailNotifier

__all__ = [
    "EmailNotifier",
    "Notifier",
    "render_report_html",
]
