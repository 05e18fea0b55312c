# services/api/core/email_sender.py
from __future__ import annotations
import aiosmtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.mime.application import MIMEApplication
from typing import List, Dict, Optional, Any
import logging

logger = logging.getLogger(__name__)

_MIME_BY_EXT = {
    ".pdf": "application/pdf",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".csv": "text/csv",
}


def _mime_type_for(filename: str) -> str:
    for ext, mime in _MIME_BY_EXT.items():
        if filename.lower().endswith(ext):
            return mime
    return "application/octet-stream"


def build_message(
    *,
    to_email: str,
    subject: str,
    body_html: str,
    body_text: Optional[str],
    attachments: List[Dict[str, Any]],
    from_email: str,
    from_name: str,
) -> MIMEMultipart:
    msg = MIMEMultipart("mixed")
    msg['From'] = f'"{from_name}" <{from_email}>'
    msg['To'] = to_email
    msg['Subject'] = subject

    # Plain-text + HTML alternatives
    alt = MIMEMultipart("alternative")
    if body_text:
        alt.attach(MIMEText(body_text, "plain"))
    alt.attach(MIMEText(body_html, "html"))
    msg.attach(alt)

    # Attach files
    for att in attachments:
        filename = att.get("filename", "attachment")
        data = att.get("data", b"")
        mime_type = _mime_type_for(filename)

        part = MIMEApplication(data, _subtype=mime_type.split('/')[-1])
        part.replace_header('Content-Type', f'{mime_type}; name="{filename}"')
        part.add_header('Content-Disposition', f'attachment; filename="{filename}"')
        msg.attach(part)

    return msg


async def send_email_with_attachments(
    *,
    to_email: str,
    subject: str,
    body_html: str,
    attachments: List[Dict[str, Any]],  # [{"filename": "x.csv", "data": b"..."}]
    smtp_host: str,
    smtp_port: int,
    smtp_user: str,
    smtp_password: str,
    from_email: str,
    from_name: str,
    body_text: Optional[str] = None,
) -> bool:
    """
    Send one email with attachments via SMTP (STARTTLS).
    Returns True on success, False on failure.
    """
    try:
        msg = build_message(
            to_email=to_email,
            subject=subject,
            body_html=body_html,
            body_text=body_text,
            attachments=attachments,
            from_email=from_email,
            from_name=from_name,
        )

        await aiosmtplib.send(
            msg,
            hostname=smtp_host,
            port=smtp_port,
            username=smtp_user,
            password=smtp_password,
            start_tls=True,
            timeout=10,
        )

        logger.info(f"✓ Email sent to {to_email} with {len(attachments)} attachments")
        return True

    except Exception as e:
        logger.error(f"✗ Email send failed to {to_email}: {e}")
        return False


async def verify_smtp_login(
    *,
    smtp_host: str,
    smtp_port: int,
    smtp_user: str,
    smtp_password: str,
) -> None:
    """Connect, STARTTLS and log in without sending anything. Raises on failure."""
    smtp = aiosmtplib.SMTP(hostname=smtp_host, port=smtp_port, start_tls=True, timeout=10)
    await smtp.connect()
    try:
        await smtp.login(smtp_user, smtp_password)
    finally:
        await smtp.quit()
