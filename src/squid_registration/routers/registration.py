"""Registration submission and status endpoints"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from squid_registration.errors import NotFoundError, ValidationError
from squid_registration.routers.request_validator import parse_submission
from squid_registration.routers.views import registration_summary
from squid_registration.services.registration_service import (
    RegistrationService,
    get_registration_service,
)

router = APIRouter(prefix="/api", tags=["Registration"])

logger = logging.getLogger(__name__)

RATE_LIMIT_WINDOW = timedelta(hours=1)
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


async def _read_body(request: Request) -> Any:
    """Read a JSON or HTML-form body into plain Python data"""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form_data = await request.form()
        return {key: value for key, value in form_data.items() if isinstance(value, str)}

    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError(
            [{"field": "body", "message": "Request body must be valid JSON"}]
        )


def _enforce_rate_limit(
    request: Request, service: RegistrationService, ip_address: Optional[str]
):
    limit = request.app.state.config.get("registration_rate_limit")
    if not limit or not ip_address:
        return

    since = datetime.now(timezone.utc) - RATE_LIMIT_WINDOW
    if service.count_recent_registrations(ip_address, since) >= limit:
        logger.warning(f"Registration rate limit hit for {ip_address}")
        raise HTTPException(
            status_code=429,
            detail={
                "error": "Too many registration attempts. Please wait before trying again.",
                "retryAfter": "1 hour",
            },
        )


@router.post("/register")
async def register(
    request: Request,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    """Validate and store a registration, then notify the webhook"""
    with request.app.state.submission_gate.track():
        ip_address = _client_ip(request)
        _enforce_rate_limit(request, registration_service, ip_address)

        submission = parse_submission(await _read_body(request))
        registration = await registration_service.submit(
            submission,
            ip_address=ip_address,
            user_agent=request.headers.get("user-agent"),
        )

    return {
        "success": True,
        "message": "Registration completed successfully",
        "id": registration.id,
        "webhookStatus": registration.webhook_status.value,
    }


@router.get("/registration/{registration_id}")
async def get_registration(
    registration_id: str,
    registration_service: RegistrationService = Depends(get_registration_service),
):
    """Return id, role, timestamp and webhook status of a registration"""
    if not registration_id.isdecimal():
        raise NotFoundError(f"Registration {registration_id} not found")

    registration = registration_service.get_registration(int(registration_id))
    return registration_summary(registration)
