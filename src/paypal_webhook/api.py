"""認証付きリクエスト送信（全オペレーション共通の送信層）"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from .auth import TokenProvider
from .config import ClientConfig
from .exceptions import PayPalError, PayPalErrorCodes
from .models import ErrorResponse

logger = structlog.get_logger(__name__)


class ApiClient:
    """PayPal REST API への認証付きリクエスト送信を担う。

    リトライは行わない。タイムアウトは config.timeout_seconds で httpx に委ねる。
    """

    def __init__(self, config: ClientConfig, token_provider: TokenProvider | None = None) -> None:
        self._config = config
        self._token_provider = token_provider or TokenProvider(config)

    @property
    def api_base(self) -> str:
        return self._config.api_base

    def _make_client(self) -> httpx.Client:
        return httpx.Client(timeout=self._config.timeout_seconds)

    def new_request(
        self,
        method: str,
        url: str,
        body: Any = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Request:
        """リクエストを構築する。body は dict / list / to_dict() を持つオブジェクト。"""
        try:
            content: bytes | None = None
            if body is not None:
                if hasattr(body, "to_dict"):
                    body = body.to_dict()
                content = json.dumps(body).encode("utf-8")
            return httpx.Request(
                method,
                url,
                params=params or None,
                content=content,
                headers={"Content-Type": "application/json"} if content is not None else None,
            )
        except (TypeError, ValueError, httpx.InvalidURL) as e:
            raise PayPalError(
                code=PayPalErrorCodes.INVALID_REQUEST,
                message=f"Failed to build {method} request for {url}: {e}",
                cause=e,
            ) from e

    def _handle_error(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            data = resp.json()
        except ValueError:
            data = None
        error_response = ErrorResponse.from_dict(data) if isinstance(data, dict) else None
        if resp.status_code == 404:
            code = PayPalErrorCodes.NOT_FOUND
        elif resp.status_code in (401, 403):
            code = PayPalErrorCodes.UNAUTHORIZED
        else:
            code = PayPalErrorCodes.HTTP_ERROR
        detail = (
            f"{error_response.name}: {error_response.message}"
            if error_response is not None and error_response.name
            else resp.text
        )
        raise PayPalError(
            code=code,
            message=f"{resp.request.method} {resp.request.url}: HTTP {resp.status_code}: {detail}",
            status_code=resp.status_code,
            response=error_response,
        )

    def send(self, request: httpx.Request) -> Any | None:
        """リクエストを送信し、デコード済み JSON を返す。ボディが空なら None。"""
        request.headers.setdefault("Accept", "application/json")
        request.headers.setdefault("Accept-Language", "en_US")
        request.headers.setdefault("Content-Type", "application/json")
        try:
            with self._make_client() as client:
                resp = client.send(request)
        except httpx.HTTPError as e:
            raise PayPalError(
                code=PayPalErrorCodes.HTTP_ERROR,
                message=f"{request.method} {request.url} failed: {e}",
                cause=e,
            ) from e

        logger.debug(
            "paypal_api_exchange",
            method=request.method,
            url=str(request.url),
            status=resp.status_code,
            debug_id=resp.headers.get("Paypal-Debug-Id", ""),
        )
        self._handle_error(resp)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise PayPalError(
                code=PayPalErrorCodes.DECODE_ERROR,
                message=f"{request.method} {request.url}: response is not valid JSON",
                cause=e,
                status_code=resp.status_code,
            ) from e

    def send_with_auth(self, request: httpx.Request) -> Any | None:
        """Bearer トークンを付与して send() する。"""
        token = self._token_provider.get_cached_token()
        request.headers["Authorization"] = f"Bearer {token.access_token}"
        return self.send(request)
