# services/api/core/hr_mailer.py
from __future__ import annotations

import asyncio
import html
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from core.drive_client import download_sheet_file
from core.email_sender import send_email_with_attachments, verify_smtp_login
from core.errors import UpstreamFailure
from settings import Settings

logger = logging.getLogger(__name__)


def get_from_email(settings: Settings) -> str:
    """
    Gmail SMTP rejects a From that differs from the login, so Gmail users
    always send as themselves.
    """
    smtp_user = settings.smtp_user or ""
    if "@gmail.com" in smtp_user:
        return smtp_user
    return settings.from_email or smtp_user


def _missing_settings(settings: Settings) -> List[str]:
    required = {
        "SMTP_HOST": settings.smtp_host,
        "SMTP_PORT": settings.smtp_port,
        "SMTP_USER": settings.smtp_user,
        "SMTP_PASSWORD": settings.smtp_password,
        "HR_EMAILS": settings.hr_emails,
    }
    return [k for k, v in required.items() if not v]


def _recipients(settings: Settings) -> List[str]:
    hr = settings.get_hr_emails_list()
    if not hr:
        raise UpstreamFailure("Failed to send email", "No HR emails configured (HR_EMAILS)")
    return hr


async def _send_to_all(
    settings: Settings,
    *,
    recipients: List[str],
    subject: str,
    body_html: str,
    body_text: str,
    attachments: List[Dict[str, Any]],
    operation: str,
) -> None:
    missing = _missing_settings(settings)
    if missing:
        raise UpstreamFailure(operation, f"Missing email configuration: {', '.join(missing)}")

    failed = []
    for to in recipients:
        ok = await send_email_with_attachments(
            to_email=to,
            subject=subject,
            body_html=body_html,
            body_text=body_text,
            attachments=attachments,
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
            from_email=get_from_email(settings),
            from_name=settings.from_name,
        )
        if not ok:
            failed.append(to)

    if failed:
        raise UpstreamFailure(operation, f"Delivery failed for: {', '.join(failed)}")
    logger.info(f"{operation}: sent to {len(recipients)} HR recipients")


def _wrap_html(title: str, subtitle: str, inner: str, footer: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<body style="font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; color: #333; background-color: #f8f9fa; padding: 20px;">
  <div style="max-width: 600px; margin: 0 auto; background-color: white; border-radius: 8px;">
    <div style="background-color: #2c3e50; color: white; padding: 30px 20px; text-align: center;">
      <h1 style="margin: 0; font-size: 24px; font-weight: 300;">{title}</h1>
      <p style="margin: 8px 0 0 0;">{subtitle}</p>
    </div>
    <div style="padding: 30px 20px; line-height: 1.6;">
      {inner}
    </div>
    <div style="background-color: #ecf0f1; padding: 20px; text-align: center; font-size: 12px; color: #7f8c8d;">
      {footer}
    </div>
  </div>
</body>
</html>"""


def _long_date(d: date) -> str:
    return d.strftime("%A, %B %d, %Y")


async def send_project_report_to_hr(
    settings: Settings,
    client,
    custom_message: Optional[str] = None,
    today: Optional[date] = None,
) -> List[str]:
    """
    Weekly report: CSV + Excel snapshot of the sheet to every HR address.
    Returns the recipient list. Raises UpstreamFailure on any failure.
    """
    today = today or date.today()
    recipients = _recipients(settings)
    logger.info(f"Sending project report to {len(recipients)} HR recipients: {', '.join(recipients)}")

    csv_bytes, _, csv_name = await asyncio.to_thread(download_sheet_file, client, "csv")
    xlsx_bytes, _, xlsx_name = await asyncio.to_thread(download_sheet_file, client, "excel")

    subject = f"Weekly Project Report - {today.isoformat()}"
    sheet_url = settings.sheet_view_url()
    note_html = (
        f'<div style="background-color: #e8f4fd; padding: 15px; border-left: 4px solid #3498db;">'
        f"{html.escape(custom_message)}</div>"
        if custom_message
        else ""
    )
    inner = f"""
      <p>Dear HR Team,</p>
      <p>Please find attached the weekly project report generated from the live project sheet.</p>
      {note_html}
      <h3 style="color: #2c3e50;">Attached Files</h3>
      <ul>
        <li>{html.escape(csv_name)} (CSV, for data processing)</li>
        <li>{html.escape(xlsx_name)} (Excel, for analysis)</li>
      </ul>
      <p>View and edit live project data at: <a href="{sheet_url}">{sheet_url}</a></p>
      <p>Best regards,<br>Employee Management System</p>
    """
    body_html = _wrap_html(
        "Weekly Project Report",
        _long_date(today),
        inner,
        f"This is an automated message from {html.escape(settings.app_name)}. Please do not reply to this email address.",
    )
    body_text = "\n".join(
        [
            "Weekly Project Report",
            _long_date(today),
            "",
            "Dear HR Team,",
            "",
            "Please find attached the weekly project report generated from the live project sheet.",
            "",
            *([custom_message, ""] if custom_message else []),
            "Attached Files:",
            f"- {csv_name}",
            f"- {xlsx_name}",
            "",
            f"Live project data: {sheet_url}",
            "",
            "Best regards,",
            "Employee Management System",
            "",
            "---",
            f"This is an automated message from {settings.app_name}. Please do not reply to this email address.",
        ]
    )

    await _send_to_all(
        settings,
        recipients=recipients,
        subject=subject,
        body_html=body_html,
        body_text=body_text,
        attachments=[
            {"filename": csv_name, "data": csv_bytes},
            {"filename": xlsx_name, "data": xlsx_bytes},
        ],
        operation="Failed to send project report",
    )
    return recipients


async def send_custom_notification_to_hr(
    settings: Settings,
    client,
    subject: str,
    message: str,
    include_attachment: bool = False,
    today: Optional[date] = None,
) -> List[str]:
    """
    Freeform notification to every HR address, optionally with the Excel
    snapshot attached. Raises UpstreamFailure on any failure.
    """
    today = today or date.today()
    recipients = _recipients(settings)

    attachments: List[Dict[str, Any]] = []
    if include_attachment:
        logger.info("Downloading Excel file from Google Drive...")
        xlsx_bytes, _, xlsx_name = await asyncio.to_thread(download_sheet_file, client, "excel")
        attachments.append({"filename": xlsx_name, "data": xlsx_bytes})

    sheet_url = settings.sheet_view_url()
    paragraphs = "".join(f"<p>{html.escape(line)}</p>" for line in message.splitlines() if line.strip())
    attached_html = (
        "<p><strong>Attached:</strong> Excel file with current project data for offline analysis.</p>"
        if include_attachment
        else ""
    )
    inner = f"""
      <p>Dear HR Team,</p>
      {paragraphs}
      <p><a href="{sheet_url}" style="background-color: #3498db; color: white; padding: 12px 24px; border-radius: 6px; text-decoration: none;">Open Project Sheet</a></p>
      {attached_html}
      <p>For any questions or assistance, please contact the system administrator.</p>
      <p>Best regards,<br>Employee Management System</p>
    """
    body_html = _wrap_html(
        "Project Management Notification",
        _long_date(today),
        inner,
        f"This is an automated message from {html.escape(settings.app_name)}. Please do not reply to this email address.",
    )
    body_text = "\n".join(
        [
            "Project Management Notification",
            _long_date(today),
            "",
            "Dear HR Team,",
            "",
            message,
            "",
            f"View and edit live project data directly at: {sheet_url}",
            "",
            *(
                ["Attached Files:", "Excel file with current project data is attached for offline analysis.", ""]
                if include_attachment
                else []
            ),
            "Best regards,",
            "Employee Management System",
        ]
    )

    await _send_to_all(
        settings,
        recipients=recipients,
        subject=subject,
        body_html=body_html,
        body_text=body_text,
        attachments=attachments,
        operation="Failed to send notification",
    )
    return recipients


async def validate_email_configuration(settings: Settings) -> Dict[str, Any]:
    """
    Report which mail settings are present and try an SMTP login.
    Never raises.
    """
    hr = settings.get_hr_emails_list()
    configuration = {
        "hrEmailsConfigured": bool(hr),
        "smtpHostConfigured": bool(settings.smtp_host),
        "smtpUserConfigured": bool(settings.smtp_user),
        "smtpPassConfigured": bool(settings.smtp_password),
        "fromEmailConfigured": bool(settings.from_email),
        "hrEmailCount": len(hr),
        "smtpHost": settings.smtp_host or "Not configured",
        "fromEmail": get_from_email(settings) or "Not configured",
    }

    missing = _missing_settings(settings)
    if missing:
        return {
            "success": False,
            "configuration": configuration,
            "message": f"Email configuration incomplete. Missing: {', '.join(missing)}",
        }

    try:
        await verify_smtp_login(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
        )
    except Exception as e:
        logger.error(f"SMTP verification failed: {e}")
        return {
            "success": False,
            "configuration": configuration,
            "message": f"SMTP connection failed: {e}",
        }

    return {
        "success": True,
        "configuration": configuration,
        "message": f"Email configuration is valid. Ready to send to {len(hr)} HR recipients.",
    }
