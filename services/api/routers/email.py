# services/api/routers/email.py
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from core.access_policy import Operation
from core.auth import require_operation
from core.errors import UpstreamFailure
from core.hr_mailer import send_custom_notification_to_hr, validate_email_configuration
from main import get_sheets_client, get_settings  # DI helpers
from models import SessionUser
from schemas.project import EmailTestIn
from settings import Settings

router = APIRouter(prefix="/api/email", tags=["email"])
logger = logging.getLogger(__name__)

NOTIFICATION_SUBJECT = "Project Management Update"

HrUser = Annotated[SessionUser, Depends(require_operation(Operation.EMAIL))]
AppSettings = Annotated[Settings, Depends(get_settings)]


@router.get("/test")
async def email_status(user: HrUser, settings: AppSettings):
    result = await validate_email_configuration(settings)
    return {
        "success": result["success"],
        "status": "ready" if result["success"] else "incomplete",
        "configuration": result["configuration"],
        "message": result["message"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checkedBy": user.email,
    }


@router.post("/test")
async def send_test_notification(body: EmailTestIn, user: HrUser, settings: AppSettings):
    """Send a freeform notification (optionally with the Excel snapshot) to HR."""
    check = await validate_email_configuration(settings)
    if not check["success"]:
        raise UpstreamFailure("Email configuration validation failed", check["message"])

    # The spreadsheet is only needed for the attachment
    client = None
    if body.include_attachment:
        client = await asyncio.to_thread(get_sheets_client, settings)

    recipients = await send_custom_notification_to_hr(
        settings,
        client,
        subject=NOTIFICATION_SUBJECT,
        message=body.message,
        include_attachment=body.include_attachment,
    )
    logger.info(f"{user.email} sent a notification to {len(recipients)} HR recipients")
    return {
        "success": True,
        "message": f"Notification sent to {len(recipients)} HR recipients",
        "recipients": len(recipients),
    }
