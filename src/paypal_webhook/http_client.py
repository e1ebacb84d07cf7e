"""PayPal Webhook HTTP クライアント実装"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import structlog

from .api import ApiClient
from .client import WebhookClient
from .config import ClientConfig
from .exceptions import PayPalError, PayPalErrorCodes
from .models import (
    Event,
    EventTypeList,
    GetWebhookEventsFilter,
    SimulateEventRequest,
    VerificationStatus,
    VerifyWebhookSignatureRequest,
    Webhook,
    WebhookIDList,
    WebhookPatch,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

WEBHOOKS_PATH = "/v1/notifications/webhooks"
EVENT_TYPES_PATH = "/v1/notifications/webhooks-event-types"
EVENTS_PATH = "/v1/notifications/webhook-events"
SIMULATE_EVENT_PATH = "/v1/notifications/simulate-event"
VERIFY_SIGNATURE_PATH = "/v1/notifications/verify-webhook-signature"


def _require_id(value: str, what: str) -> None:
    if not value:
        raise PayPalError(
            code=PayPalErrorCodes.MISSING_ID,
            message=f"No ID specified for {what}",
        )


def _segment(value: str) -> str:
    """ID をパスセグメントとしてエスケープする。"""
    return quote(value, safe="")


def _unwrap_list(data: Any, key: str) -> list[dict[str, Any]]:
    """{"<key>": [...]} 形式のエンベロープを剥がす。裸の配列もそのまま受け付ける。"""
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return data.get(key) or []
    raise PayPalError(
        code=PayPalErrorCodes.DECODE_ERROR,
        message=f"Unexpected response shape for {key}: {type(data).__name__}",
    )


def _as_dict(data: Any, context: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise PayPalError(
            code=PayPalErrorCodes.DECODE_ERROR,
            message=f"{context}: expected a JSON object in response",
        )
    return data


def _decode(factory: Callable[[Any], T], data: Any, context: str) -> T:
    """レスポンスをモデルに変換する。不正な値は DECODE_ERROR にする。"""
    try:
        return factory(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise PayPalError(
            code=PayPalErrorCodes.DECODE_ERROR,
            message=f"{context}: malformed response: {e!r}",
            cause=e,
        ) from e


def _decode_list(factory: Callable[[Any], T], items: list[Any], context: str) -> list[T]:
    return _decode(lambda rows: [factory(row) for row in rows], items, context)


def build_webhook_patches(webhook: Webhook) -> list[WebhookPatch]:
    """Webhook 更新用の JSON Patch（/url と /event_types の置換）を組み立てる。

    Raises:
        PayPalError: webhook.id が空の場合 (MISSING_ID)
    """
    _require_id(webhook.id, "Webhook")
    return [
        WebhookPatch(path="/url", value=webhook.url),
        WebhookPatch(path="/event_types", value=[e.to_dict() for e in webhook.event_types]),
    ]


class HttpWebhookClient(WebhookClient):
    """httpx を使った PayPal Webhook 管理 API クライアント。

    各メソッドは 1 回の HTTP 交換に対応する。送信層 (ApiClient) が送出した
    PayPalError はそのまま呼び出し元に伝播する。
    """

    def __init__(self, config: ClientConfig | None = None, api: ApiClient | None = None) -> None:
        if api is None:
            if config is None:
                raise ValueError("config or api must be given")
            api = ApiClient(config)
        self._api = api

    def _url(self, path: str) -> str:
        return f"{self._api.api_base}{path}"

    def create_webhook(self, webhook: Webhook) -> Webhook:
        req = self._api.new_request("POST", self._url(WEBHOOKS_PATH), webhook)
        data = self._api.send_with_auth(req)
        return _decode(Webhook.from_dict, _as_dict(data, "create_webhook"), "create_webhook")

    def get_webhook(self, webhook_id: str) -> Webhook:
        _require_id(webhook_id, "Webhook")
        req = self._api.new_request("GET", self._url(f"{WEBHOOKS_PATH}/{_segment(webhook_id)}"))
        try:
            data = self._api.send_with_auth(req)
        except PayPalError as e:
            if e.code == PayPalErrorCodes.NOT_FOUND:
                raise PayPalError(
                    code=PayPalErrorCodes.WEBHOOK_NOT_FOUND,
                    message=f"Unable to get webhook with ID = {webhook_id}",
                    cause=e,
                    status_code=e.status_code,
                    response=e.response,
                ) from e
            raise
        webhook = _decode(Webhook.from_dict, data if isinstance(data, dict) else {}, "get_webhook")
        # 200 でも空ボディが返ることがあるため ID で存在を判定する
        if not webhook.id:
            raise PayPalError(
                code=PayPalErrorCodes.WEBHOOK_NOT_FOUND,
                message=f"Unable to get webhook with ID = {webhook_id}",
            )
        return webhook

    def list_webhooks(self) -> list[Webhook]:
        req = self._api.new_request("GET", self._url(WEBHOOKS_PATH))
        data = self._api.send_with_auth(req)
        return _decode_list(Webhook.from_dict, _unwrap_list(data, "webhooks"), "list_webhooks")

    def update_webhook(self, webhook: Webhook) -> None:
        patches = build_webhook_patches(webhook)
        req = self._api.new_request(
            "POST",
            self._url(f"{WEBHOOKS_PATH}/{_segment(webhook.id)}"),
            [p.to_dict() for p in patches],
        )
        self._api.send_with_auth(req)

    def delete_webhook(self, webhook_id: str) -> None:
        _require_id(webhook_id, "Webhook")
        req = self._api.new_request("DELETE", self._url(f"{WEBHOOKS_PATH}/{_segment(webhook_id)}"))
        self._api.send_with_auth(req)

    def list_event_types(self) -> EventTypeList:
        req = self._api.new_request("GET", self._url(EVENT_TYPES_PATH))
        data = self._api.send_with_auth(req)
        return _decode(EventTypeList.from_dict, data if isinstance(data, dict) else {}, "list_event_types")

    def get_event(self, event_id: str) -> Event:
        _require_id(event_id, "Event")
        req = self._api.new_request("GET", self._url(f"{EVENTS_PATH}/{_segment(event_id)}"))
        try:
            data = self._api.send_with_auth(req)
        except PayPalError as e:
            if e.code == PayPalErrorCodes.NOT_FOUND:
                raise PayPalError(
                    code=PayPalErrorCodes.EVENT_NOT_FOUND,
                    message=f"Unable to get event with ID = {event_id}",
                    cause=e,
                    status_code=e.status_code,
                    response=e.response,
                ) from e
            raise
        event = _decode(Event.from_dict, data if isinstance(data, dict) else {}, "get_event")
        if not event.id:
            raise PayPalError(
                code=PayPalErrorCodes.EVENT_NOT_FOUND,
                message=f"Unable to get event with ID = {event_id}",
            )
        return event

    def resend_event(self, event_id: str, webhook_ids: list[str]) -> Event:
        _require_id(event_id, "Event")
        req = self._api.new_request(
            "POST",
            self._url(f"{EVENTS_PATH}/{_segment(event_id)}/resend"),
            WebhookIDList(webhook_ids=list(webhook_ids)),
        )
        data = self._api.send_with_auth(req)
        return _decode(Event.from_dict, _as_dict(data, "resend_event"), "resend_event")

    def list_events(self, filter: GetWebhookEventsFilter | None = None) -> list[Event]:
        params = filter.to_query() if filter is not None else {}
        req = self._api.new_request("GET", self._url(EVENTS_PATH), params=params)
        data = self._api.send_with_auth(req)
        return _decode_list(Event.from_dict, _unwrap_list(data, "events"), "list_events")

    def simulate_event(self, request: SimulateEventRequest) -> Event:
        body = request.to_dict()
        logger.info("simulate_event_request", body=json.dumps(body))
        req = self._api.new_request("POST", self._url(SIMULATE_EVENT_PATH), body)
        data = self._api.send_with_auth(req)
        return _decode(Event.from_dict, _as_dict(data, "simulate_event"), "simulate_event")

    def verify_webhook_signature(
        self, request: VerifyWebhookSignatureRequest
    ) -> VerificationStatus:
        req = self._api.new_request("POST", self._url(VERIFY_SIGNATURE_PATH), request)
        data = self._api.send_with_auth(req)
        return _decode(
            VerificationStatus.from_dict,
            _as_dict(data, "verify_webhook_signature"),
            "verify_webhook_signature",
        )
