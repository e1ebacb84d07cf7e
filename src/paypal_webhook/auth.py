"""OAuth2 Client Credentials フローによるアクセストークン取得"""

from __future__ import annotations

import threading
from typing import Any

import httpx
import structlog

from .config import ClientConfig
from .exceptions import PayPalError, PayPalErrorCodes
from .models import AccessToken

logger = structlog.get_logger(__name__)

TOKEN_PATH = "/v1/oauth2/token"


class TokenProvider:
    """httpx を使った OAuth2 Client Credentials フロー実装。

    取得したトークンはキャッシュし、有効期限の
    token_refresh_margin_seconds 前になったら取り直す。
    """

    def __init__(self, config: ClientConfig) -> None:
        self._config = config
        self._cached_token: AccessToken | None = None
        self._lock = threading.Lock()

    def _request_token(self) -> dict[str, Any]:
        try:
            with httpx.Client(timeout=self._config.timeout_seconds) as client:
                resp = client.post(
                    f"{self._config.api_base}{TOKEN_PATH}",
                    data={"grant_type": "client_credentials"},
                    auth=(self._config.client_id, self._config.secret),
                    headers={"Accept": "application/json", "Accept-Language": "en_US"},
                )
            resp.raise_for_status()
            result: dict[str, Any] = resp.json()
            return result
        except httpx.HTTPStatusError as e:
            code = (
                PayPalErrorCodes.UNAUTHORIZED
                if e.response.status_code == 401
                else PayPalErrorCodes.TOKEN_REQUEST_FAILED
            )
            raise PayPalError(
                code=code,
                message=f"Token request failed: HTTP {e.response.status_code}",
                cause=e,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise PayPalError(
                code=PayPalErrorCodes.TOKEN_REQUEST_FAILED,
                message=f"Token request failed: {e}",
                cause=e,
            ) from e
        except ValueError as e:
            raise PayPalError(
                code=PayPalErrorCodes.TOKEN_REQUEST_FAILED,
                message=f"Token response is not valid JSON: {e}",
                cause=e,
            ) from e

    def get_token(self) -> AccessToken:
        """新しいアクセストークンを取得する。"""
        response = self._request_token()
        try:
            token = AccessToken.from_response(response)
        except KeyError as e:
            raise PayPalError(
                code=PayPalErrorCodes.TOKEN_REQUEST_FAILED,
                message="Token response has no access_token",
                cause=e,
            ) from e
        logger.debug("access_token_acquired", expires_at=token.expires_at, app_id=token.app_id)
        return token

    def get_cached_token(self) -> AccessToken:
        """キャッシュされたトークンを返す（期限切れ間近の場合は更新）。"""
        with self._lock:
            margin = self._config.token_refresh_margin_seconds
            if self._cached_token is None or self._cached_token.is_expired(margin):
                self._cached_token = self.get_token()
            return self._cached_token

    def invalidate(self) -> None:
        """キャッシュ済みトークンを破棄する。"""
        with self._lock:
            self._cached_token = None
