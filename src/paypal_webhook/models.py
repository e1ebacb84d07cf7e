"""PayPal Webhook API データモデル"""

from __future__ import annotations

import json
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from .exceptions import PayPalError, PayPalErrorCodes


def format_rfc3339(value: datetime) -> str:
    """datetime を RFC3339 (UTC, 末尾 Z) 文字列に変換する。naive は UTC とみなす。"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    if value.microsecond:
        return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_rfc3339(value: str | None) -> datetime | None:
    """RFC3339 文字列を UTC の datetime に変換する。空値は None。オフセット無しは UTC とみなす。"""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class VerificationResult(StrEnum):
    """署名検証結果。"""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


@dataclass
class Link:
    """HATEOAS リンク。"""

    href: str
    rel: str = ""
    method: str = ""
    enc_type: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Link:
        return cls(
            href=data.get("href", ""),
            rel=data.get("rel", ""),
            method=data.get("method", ""),
            enc_type=data.get("encType", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"href": self.href, "rel": self.rel, "method": self.method}
        if self.enc_type:
            result["encType"] = self.enc_type
        return result


@dataclass
class WebhookEventType:
    """Webhook が購読できるイベント種別。"""

    name: str
    description: str = ""
    status: str = ""
    resource_versions: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WebhookEventType:
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            status=data.get("status", ""),
            resource_versions=list(data.get("resource_versions", [])),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        if self.status:
            result["status"] = self.status
        if self.resource_versions:
            result["resource_versions"] = list(self.resource_versions)
        return result


@dataclass
class Webhook:
    """登録済み Webhook（コールバック購読）。"""

    url: str
    event_types: list[WebhookEventType] = field(default_factory=list)
    id: str = ""
    links: list[Link] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Webhook:
        """API レスポンス辞書から Webhook を生成する。"""
        return cls(
            id=data.get("id", ""),
            url=data.get("url", ""),
            event_types=[WebhookEventType.from_dict(e) for e in data.get("event_types") or []],
            links=[Link.from_dict(link) for link in data.get("links") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "url": self.url,
            "event_types": [e.to_dict() for e in self.event_types],
        }
        if self.id:
            result["id"] = self.id
        if self.links:
            result["links"] = [link.to_dict() for link in self.links]
        return result


@dataclass
class WebhookPatch:
    """JSON Patch 形式の部分更新操作。"""

    path: str
    value: Any
    op: str = "replace"

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op, "path": self.path, "value": self.value}


@dataclass
class EventTypeList:
    """購読可能なイベント種別の一覧。"""

    event_types: list[WebhookEventType] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventTypeList:
        return cls(
            event_types=[WebhookEventType.from_dict(e) for e in data.get("event_types") or []],
        )

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.event_types]


@dataclass
class Event:
    """配信済み（またはシミュレートされた）Webhook イベント通知。"""

    id: str
    event_type: str = ""
    resource_type: str = ""
    summary: str = ""
    resource: dict[str, Any] = field(default_factory=dict)
    create_time: datetime | None = None
    links: list[Link] = field(default_factory=list)
    event_version: str = ""
    resource_version: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        """API レスポンス辞書から Event を生成する。"""
        return cls(
            id=data.get("id", ""),
            event_type=data.get("event_type", ""),
            resource_type=data.get("resource_type", ""),
            summary=data.get("summary", ""),
            resource=data.get("resource") or {},
            create_time=parse_rfc3339(data.get("create_time")),
            links=[Link.from_dict(link) for link in data.get("links") or []],
            event_version=data.get("event_version", ""),
            resource_version=data.get("resource_version", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "event_type": self.event_type,
            "resource_type": self.resource_type,
            "summary": self.summary,
            "resource": self.resource,
            "links": [link.to_dict() for link in self.links],
            "event_version": self.event_version,
            "resource_version": self.resource_version,
        }
        if self.create_time is not None:
            result["create_time"] = format_rfc3339(self.create_time)
        return result


@dataclass
class WebhookIDList:
    """イベント再送先 Webhook ID の一覧。"""

    webhook_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"webhook_ids": list(self.webhook_ids)}


@dataclass
class GetWebhookEventsFilter:
    """イベント一覧取得のクエリフィルタ。未設定（0 / 空 / None）の項目はクエリに含めない。"""

    page_size: int = 0
    start_time: datetime | None = None
    end_time: datetime | None = None
    transaction_id: str = ""
    event_type: str = ""

    def to_query(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.page_size:
            params["page_size"] = str(int(self.page_size))
        # RFC3339 は秒精度で送る
        if self.start_time is not None:
            params["start_time"] = format_rfc3339(self.start_time.replace(microsecond=0))
        if self.end_time is not None:
            params["end_time"] = format_rfc3339(self.end_time.replace(microsecond=0))
        if self.transaction_id:
            params["transaction_id"] = self.transaction_id
        if self.event_type:
            params["event_type"] = self.event_type
        return params


@dataclass
class SimulateEventRequest:
    """テストイベントのシミュレーションリクエスト。"""

    event_type: str
    webhook_id: str = ""
    url: str = ""
    resource_version: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"event_type": self.event_type}
        if self.webhook_id:
            result["webhook_id"] = self.webhook_id
        if self.url:
            result["url"] = self.url
        if self.resource_version:
            result["resource_version"] = self.resource_version
        return result


@dataclass
class VerifyWebhookSignatureRequest:
    """Webhook 署名検証リクエスト。"""

    auth_algo: str
    cert_url: str
    transmission_id: str
    transmission_sig: str
    transmission_time: str
    webhook_id: str
    webhook_event: dict[str, Any] = field(default_factory=dict)

    HEADER_AUTH_ALGO = "paypal-auth-algo"
    HEADER_CERT_URL = "paypal-cert-url"
    HEADER_TRANSMISSION_ID = "paypal-transmission-id"
    HEADER_TRANSMISSION_SIG = "paypal-transmission-sig"
    HEADER_TRANSMISSION_TIME = "paypal-transmission-time"

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        body: bytes | str | dict[str, Any],
        webhook_id: str,
    ) -> VerifyWebhookSignatureRequest:
        """受信した Webhook 配信のヘッダーとボディから検証リクエストを組み立てる。

        ヘッダー名の大文字小文字は区別しない。

        Raises:
            PayPalError: ボディが JSON オブジェクトとして解釈できない場合 (INVALID_REQUEST)
        """
        lowered = {k.lower(): v for k, v in headers.items()}
        if isinstance(body, dict):
            event = body
        else:
            try:
                event = json.loads(body)
            except ValueError as e:
                raise PayPalError(
                    code=PayPalErrorCodes.INVALID_REQUEST,
                    message=f"Webhook body is not valid JSON: {e}",
                    cause=e,
                ) from e
            if not isinstance(event, dict):
                raise PayPalError(
                    code=PayPalErrorCodes.INVALID_REQUEST,
                    message="Webhook body must be a JSON object",
                )
        return cls(
            auth_algo=lowered.get(cls.HEADER_AUTH_ALGO, ""),
            cert_url=lowered.get(cls.HEADER_CERT_URL, ""),
            transmission_id=lowered.get(cls.HEADER_TRANSMISSION_ID, ""),
            transmission_sig=lowered.get(cls.HEADER_TRANSMISSION_SIG, ""),
            transmission_time=lowered.get(cls.HEADER_TRANSMISSION_TIME, ""),
            webhook_id=webhook_id,
            webhook_event=event,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "auth_algo": self.auth_algo,
            "cert_url": self.cert_url,
            "transmission_id": self.transmission_id,
            "transmission_sig": self.transmission_sig,
            "transmission_time": self.transmission_time,
            "webhook_id": self.webhook_id,
            "webhook_event": self.webhook_event,
        }


@dataclass
class VerificationStatus:
    """サーバーが返す署名検証結果。"""

    verification_status: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VerificationStatus:
        return cls(verification_status=data.get("verification_status", ""))

    @property
    def is_success(self) -> bool:
        return self.verification_status == VerificationResult.SUCCESS


@dataclass
class ErrorDetail:
    """エラーレスポンスの詳細項目。"""

    field: str = ""
    issue: str = ""
    description: str = ""
    location: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ErrorDetail:
        return cls(
            field=data.get("field", ""),
            issue=data.get("issue", ""),
            description=data.get("description", ""),
            location=data.get("location", ""),
        )


@dataclass
class ErrorResponse:
    """非 2xx レスポンスのボディ。"""

    name: str = ""
    message: str = ""
    debug_id: str = ""
    information_link: str = ""
    details: list[ErrorDetail] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ErrorResponse:
        return cls(
            name=data.get("name", ""),
            message=data.get("message", ""),
            debug_id=data.get("debug_id", ""),
            information_link=data.get("information_link", ""),
            details=[ErrorDetail.from_dict(d) for d in data.get("details") or []],
        )


@dataclass
class AccessToken:
    """OAuth2 アクセストークン。"""

    access_token: str
    token_type: str
    expires_at: float  # Unix timestamp
    scope: str = ""
    app_id: str = ""

    def is_expired(self, margin_seconds: float = 60.0) -> bool:
        """有効期限が切れているか、margin_seconds 以内に切れるかを返す。"""
        return time.time() >= (self.expires_at - margin_seconds)

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> AccessToken:
        """OAuth2 レスポンス辞書から AccessToken を生成する。"""
        expires_in = int(response.get("expires_in", 3600))
        return cls(
            access_token=response["access_token"],
            token_type=response.get("token_type", "Bearer"),
            expires_at=time.time() + expires_in,
            scope=response.get("scope", ""),
            app_id=response.get("app_id", ""),
        )
