# send_email.py

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape
from typing import Optional

from config import settings
from schemas.noticeSchema.noticeSchema import NoticeResponse

logger = logging.getLogger(__name__)


def notice_url(notice_id: str, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.FRONTEND_URL).rstrip("/")
    return f"{base}/notice/{notice_id}"


def render_notice_html(notice: NoticeResponse, link: str) -> str:
    published = notice.publishAt.strftime("%B %d, %Y %I:%M %p UTC")
    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>New Notice</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f4f4f4;">
  <div style="background-color: #ffffff; padding: 30px; border-radius: 10px;">
    <h1 style="color: #007bff; text-align: center;">College Notice</h1>
    <h2 style="color: #2c3e50; border-left: 4px solid #007bff; padding: 10px 15px; background-color: #f8f9fa;">{escape(notice.title)}</h2>
    <p>
      <strong>Category:</strong>
      <span style="background-color: #007bff; color: white; padding: 5px 15px; border-radius: 20px; text-transform: uppercase;">{escape(notice.category)}</span>
    </p>
    <p style="color: #6c757d;"><strong>Published:</strong> {published}</p>
    <div style="padding: 20px; border: 1px solid #dee2e6; border-radius: 5px; white-space: pre-line;">{escape(notice.description)}</div>
    <p style="text-align: center; margin: 30px 0;">
      <a href="{escape(link, quote=True)}" style="background-color: #007bff; color: white; text-decoration: none; padding: 15px 30px; border-radius: 5px;">View Full Notice</a>
    </p>
    <p style="text-align: center; color: #6c757d; font-size: 14px;">This is an automated notification from the College Notice System.</p>
  </div>
</body>
</html>
"""


def build_notice_email(to: str, notice: NoticeResponse, base_url: Optional[str] = None) -> MIMEMultipart:
    msg = MIMEMultipart()
    msg["From"] = formataddr(("College Notices", settings.EMAIL_ADDRESS or ""))
    msg["To"] = to
    msg["Subject"] = f"New Notice: {notice.title}"

    msg.attach(MIMEText(render_notice_html(notice, notice_url(notice.id, base_url)), "html"))
    return msg


def send_notice_email(to: str, notice: NoticeResponse) -> None:
    """Send one notice email over SMTP. Errors, including timeouts, propagate to the caller."""
    msg = build_notice_email(to, notice)

    # timeout bounds connect and every reply
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT_SECONDS) as server:
        server.starttls()
        if settings.EMAIL_ADDRESS and settings.EMAIL_PASSWORD:
            server.login(settings.EMAIL_ADDRESS, settings.EMAIL_PASSWORD)
        server.send_message(msg)

    logger.info(f"Notice email sent to {to} for notice {notice.id}")
