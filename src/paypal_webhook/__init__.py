"""PayPal webhook management client library."""

from .api import ApiClient
from .auth import TokenProvider
from .client import WebhookClient
from .config import API_BASE_LIVE, API_BASE_SANDBOX, AppConfig, ClientConfig, LogConfig, load_config
from .exceptions import PayPalError, PayPalErrorCodes
from .http_client import HttpWebhookClient, build_webhook_patches
from .logger import configure_logging
from .models import (
    AccessToken,
    ErrorDetail,
    ErrorResponse,
    Event,
    EventTypeList,
    GetWebhookEventsFilter,
    Link,
    SimulateEventRequest,
    VerificationResult,
    VerificationStatus,
    VerifyWebhookSignatureRequest,
    Webhook,
    WebhookEventType,
    WebhookIDList,
    WebhookPatch,
)

__all__ = [
    "WebhookClient",
    "HttpWebhookClient",
    "build_webhook_patches",
    "ApiClient",
    "TokenProvider",
    "ClientConfig",
    "LogConfig",
    "AppConfig",
    "load_config",
    "API_BASE_SANDBOX",
    "API_BASE_LIVE",
    "configure_logging",
    "PayPalError",
    "PayPalErrorCodes",
    "AccessToken",
    "ErrorDetail",
    "ErrorResponse",
    "Event",
    "EventTypeList",
    "GetWebhookEventsFilter",
    "Link",
    "SimulateEventRequest",
    "VerificationResult",
    "VerificationStatus",
    "VerifyWebhookSignatureRequest",
    "Webhook",
    "WebhookEventType",
    "WebhookIDList",
    "WebhookPatch",
]
