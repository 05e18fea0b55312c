# services/api/routers/cron.py
from __future__ import annotations

import hmac
import logging
from datetime import datetime, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, Header

from core.errors import AuthenticationRequired, UpstreamFailure
from core.hr_mailer import send_project_report_to_hr
from main import get_sheets_client, get_settings  # DI helpers
from schemas.project import CronReportIn
from settings import Settings

router = APIRouter(prefix="/api/cron", tags=["cron"])
logger = logging.getLogger(__name__)

AppSettings = Annotated[Settings, Depends(get_settings)]


def verify_cron_secret(
    settings: AppSettings,
    authorization: Optional[str] = Header(None),
) -> None:
    """The scheduler authenticates with `Authorization: Bearer <CRON_SECRET>`."""
    if not settings.cron_secret:
        logger.error("CRON_SECRET environment variable not set")
        raise UpstreamFailure("Cron job configuration error", "CRON_SECRET is not set")
    expected = f"Bearer {settings.cron_secret}"
    if not authorization or not hmac.compare_digest(authorization, expected):
        logger.warning("Unauthorized cron request")
        raise AuthenticationRequired("Unauthorized")


def get_client(settings: AppSettings):
    return get_sheets_client(settings)


@router.get("/send-reports")
def cron_status(settings: AppSettings):
    return {
        "success": True,
        "message": "Cron endpoint is ready",
        "configuration": {
            "cronSecretConfigured": bool(settings.cron_secret),
            "hrEmailsConfigured": bool(settings.get_hr_emails_list()),
            "smtpConfigured": bool(settings.smtp_host and settings.smtp_user and settings.smtp_password),
            "sheetsConfigured": bool(settings.sheets_spreadsheet_id),
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/send-reports", dependencies=[Depends(verify_cron_secret)])
async def send_reports(
    settings: AppSettings,
    client: Annotated[object, Depends(get_client)],
    body: Optional[CronReportIn] = Body(None),
):
    """Weekly HR report (CSV + Excel of the sheet)."""
    logger.info("Starting scheduled project report job")
    custom_message = body.custom_message if body else None
    recipients = await send_project_report_to_hr(settings, client, custom_message)
    return {
        "success": True,
        "message": "Weekly project report sent successfully",
        "recipients": len(recipients),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
