"""Service layer for registrations and webhook delivery"""

from squid_registration.services.notifier import DeliveryResult, WebhookNotifier
from squid_registration.services.registration_service import RegistrationService
from squid_registration.services.request_limiter import RequestLimiter
from squid_registration.services.submission_gate import SubmissionGate
from squid_registration.services.webhook_log_service import WebhookLogService

__all__ = [
    "DeliveryResult",
    "WebhookNotifier",
    "RegistrationService",
    "RequestLimiter",
    "SubmissionGate",
    "WebhookLogService",
]
