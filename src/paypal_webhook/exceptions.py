"""paypal_webhook ライブラリの例外型定義"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ErrorResponse


class PayPalError(Exception):
    """paypal_webhook ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
        status_code: int | None = None,
        response: ErrorResponse | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.response = response
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class PayPalErrorCodes:
    """PayPalError のエラーコード定数。"""

    # リクエスト構築
    INVALID_REQUEST: str = "INVALID_REQUEST"
    # 通信・認証・ステータス・デコード
    HTTP_ERROR: str = "HTTP_ERROR"
    UNAUTHORIZED: str = "UNAUTHORIZED"
    NOT_FOUND: str = "NOT_FOUND"
    DECODE_ERROR: str = "DECODE_ERROR"
    TOKEN_REQUEST_FAILED: str = "TOKEN_REQUEST_FAILED"
    # ドメイン
    WEBHOOK_NOT_FOUND: str = "WEBHOOK_NOT_FOUND"
    EVENT_NOT_FOUND: str = "EVENT_NOT_FOUND"
    MISSING_ID: str = "MISSING_ID"
    # 設定
    CONFIG_READ: str = "CONFIG_READ_ERROR"
    CONFIG_PARSE: str = "CONFIG_PARSE_ERROR"
    CONFIG_VALIDATION: str = "CONFIG_VALIDATION_ERROR"
