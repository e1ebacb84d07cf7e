"""WebhookClient 抽象基底クラス"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import (
    Event,
    EventTypeList,
    GetWebhookEventsFilter,
    SimulateEventRequest,
    VerificationStatus,
    VerifyWebhookSignatureRequest,
    Webhook,
)


class WebhookClient(ABC):
    """PayPal Webhook 管理 API クライアント抽象基底クラス。"""

    @abstractmethod
    def create_webhook(self, webhook: Webhook) -> Webhook:
        """Webhook を登録する。"""
        ...

    @abstractmethod
    def get_webhook(self, webhook_id: str) -> Webhook:
        """Webhook を ID で取得する。"""
        ...

    @abstractmethod
    def list_webhooks(self) -> list[Webhook]:
        """登録済み Webhook 一覧を取得する。"""
        ...

    @abstractmethod
    def update_webhook(self, webhook: Webhook) -> None:
        """Webhook の URL とイベント種別を更新する。"""
        ...

    @abstractmethod
    def delete_webhook(self, webhook_id: str) -> None:
        """Webhook を削除する。"""
        ...

    @abstractmethod
    def list_event_types(self) -> EventTypeList:
        """購読可能なイベント種別一覧を取得する。"""
        ...

    @abstractmethod
    def get_event(self, event_id: str) -> Event:
        """イベント通知を ID で取得する。"""
        ...

    @abstractmethod
    def resend_event(self, event_id: str, webhook_ids: list[str]) -> Event:
        """イベント通知を指定 Webhook に再送する。"""
        ...

    @abstractmethod
    def list_events(self, filter: GetWebhookEventsFilter | None = None) -> list[Event]:
        """イベント通知一覧を取得する。"""
        ...

    @abstractmethod
    def simulate_event(self, request: SimulateEventRequest) -> Event:
        """テストイベントをシミュレートする。"""
        ...

    @abstractmethod
    def verify_webhook_signature(
        self, request: VerifyWebhookSignatureRequest
    ) -> VerificationStatus:
        """Webhook 署名をサーバー側で検証する。"""
        ...
