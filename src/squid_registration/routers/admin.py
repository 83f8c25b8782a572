"""Admin router - registration listing and delivery audit"""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from squid_registration.auth.dependencies import is_admin_request
from squid_registration.errors import AuthorizationError
from squid_registration.models.database import get_db
from squid_registration.routers.views import registration_to_dict, webhook_log_to_dict
from squid_registration.services.registration_service import RegistrationService
from squid_registration.services.webhook_log_service import WebhookLogService

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/registrations")
async def list_registrations(
    db: Session = Depends(get_db),
    is_admin: bool = Depends(is_admin_request),
):
    """
    List every registration, newest first.

    Requires "Authorization: Bearer <ADMIN_TOKEN>".
    """
    registrations = RegistrationService(db).list_registrations(caller_is_admin=is_admin)
    return {"registrations": [registration_to_dict(r) for r in registrations]}


@router.get("/registrations/{registration_id}/webhook-logs")
async def list_webhook_logs(
    registration_id: int,
    db: Session = Depends(get_db),
    is_admin: bool = Depends(is_admin_request),
):
    """Delivery attempts recorded for one registration, in attempt order"""
    if not is_admin:
        raise AuthorizationError("Unauthorized")

    RegistrationService(db).get_registration(registration_id)
    logs = WebhookLogService(db).get_logs_for_registration(registration_id)
    return {
        "registrationId": registration_id,
        "logs": [webhook_log_to_dict(entry) for entry in logs],
    }
