"""ApiClient のユニットテスト（respx モック）"""

import json

import httpx
import pytest
import respx
from paypal_webhook.api import ApiClient
from paypal_webhook.config import ClientConfig
from paypal_webhook.exceptions import PayPalError, PayPalErrorCodes
from paypal_webhook.models import WebhookIDList

BASE_URL = "https://api.test"
TOKEN_URL = f"{BASE_URL}/v1/oauth2/token"


def make_api() -> ApiClient:
    return ApiClient(ClientConfig(client_id="client", secret="secret", api_base=BASE_URL))


def mock_token() -> respx.Route:
    return respx.post(TOKEN_URL).mock(
        return_value=httpx.Response(
            200,
            json={"access_token": "tok", "token_type": "Bearer", "expires_in": 3600},
        )
    )


def test_new_request_encodes_to_dict_body() -> None:
    """to_dict() を持つオブジェクトが JSON ボディになること。"""
    api = make_api()
    req = api.new_request("POST", f"{BASE_URL}/x", WebhookIDList(webhook_ids=["wh_1"]))
    assert req.method == "POST"
    assert json.loads(req.content) == {"webhook_ids": ["wh_1"]}
    assert req.headers["Content-Type"] == "application/json"


def test_new_request_without_body() -> None:
    """ボディ無しのリクエストが構築できること。"""
    api = make_api()
    req = api.new_request("DELETE", f"{BASE_URL}/x")
    assert req.content == b""


def test_new_request_unserializable_body() -> None:
    """JSON 化できないボディは INVALID_REQUEST になること。"""
    api = make_api()
    with pytest.raises(PayPalError) as exc_info:
        api.new_request("POST", f"{BASE_URL}/x", {"value": object()})
    assert exc_info.value.code == PayPalErrorCodes.INVALID_REQUEST


def test_new_request_malformed_url() -> None:
    """不正な URL は INVALID_REQUEST になること。"""
    api = make_api()
    with pytest.raises(PayPalError) as exc_info:
        api.new_request("GET", "https://api.test/bad\npath")
    assert exc_info.value.code == PayPalErrorCodes.INVALID_REQUEST


@respx.mock
def test_send_with_auth_sets_headers() -> None:
    """Bearer トークンと既定ヘッダーが付与されること。"""
    mock_token()
    route = respx.get(f"{BASE_URL}/x").mock(return_value=httpx.Response(200, json={"ok": True}))
    api = make_api()
    data = api.send_with_auth(api.new_request("GET", f"{BASE_URL}/x"))
    assert data == {"ok": True}
    headers = route.calls.last.request.headers
    assert headers["Authorization"] == "Bearer tok"
    assert headers["Accept"] == "application/json"
    assert headers["Accept-Language"] == "en_US"


@respx.mock
def test_send_with_auth_reuses_token() -> None:
    """2 回目以降の送信ではキャッシュ済みトークンを使うこと。"""
    token_route = mock_token()
    respx.get(f"{BASE_URL}/x").mock(return_value=httpx.Response(200, json={}))
    api = make_api()
    api.send_with_auth(api.new_request("GET", f"{BASE_URL}/x"))
    api.send_with_auth(api.new_request("GET", f"{BASE_URL}/x"))
    assert token_route.call_count == 1


@respx.mock
def test_send_empty_body_returns_none() -> None:
    """空ボディのレスポンスでは None を返すこと。"""
    respx.delete(f"{BASE_URL}/x").mock(return_value=httpx.Response(204))
    api = make_api()
    assert api.send(api.new_request("DELETE", f"{BASE_URL}/x")) is None


@respx.mock
def test_send_invalid_json() -> None:
    """JSON でないボディは DECODE_ERROR になること。"""
    respx.get(f"{BASE_URL}/x").mock(return_value=httpx.Response(200, text="<html>"))
    api = make_api()
    with pytest.raises(PayPalError) as exc_info:
        api.send(api.new_request("GET", f"{BASE_URL}/x"))
    assert exc_info.value.code == PayPalErrorCodes.DECODE_ERROR


@respx.mock
def test_send_error_response_is_decoded() -> None:
    """非 2xx のボディが ErrorResponse に変換されること。"""
    respx.post(f"{BASE_URL}/x").mock(
        return_value=httpx.Response(
            400,
            json={
                "name": "VALIDATION_ERROR",
                "message": "Invalid request",
                "debug_id": "abc123",
                "details": [{"field": "url", "issue": "INVALID_URL"}],
            },
        )
    )
    api = make_api()
    with pytest.raises(PayPalError) as exc_info:
        api.send(api.new_request("POST", f"{BASE_URL}/x", {"url": "nope"}))
    err = exc_info.value
    assert err.code == PayPalErrorCodes.HTTP_ERROR
    assert err.status_code == 400
    assert err.response is not None
    assert err.response.name == "VALIDATION_ERROR"
    assert err.response.details[0].issue == "INVALID_URL"
    assert "VALIDATION_ERROR" in str(err)


@respx.mock
def test_send_unauthorized() -> None:
    """401 は UNAUTHORIZED になること。"""
    respx.get(f"{BASE_URL}/x").mock(return_value=httpx.Response(401, text="Unauthorized"))
    api = make_api()
    with pytest.raises(PayPalError) as exc_info:
        api.send(api.new_request("GET", f"{BASE_URL}/x"))
    assert exc_info.value.code == PayPalErrorCodes.UNAUTHORIZED
    assert exc_info.value.response is None


@respx.mock
def test_send_not_found() -> None:
    """404 は NOT_FOUND になること。"""
    respx.get(f"{BASE_URL}/x").mock(return_value=httpx.Response(404))
    api = make_api()
    with pytest.raises(PayPalError) as exc_info:
        api.send(api.new_request("GET", f"{BASE_URL}/x"))
    assert exc_info.value.code == PayPalErrorCodes.NOT_FOUND


def test_send_network_error() -> None:
    """ネットワークエラーは HTTP_ERROR になり、原因例外が保持されること。"""
    with respx.mock:
        respx.get(f"{BASE_URL}/x").mock(side_effect=httpx.ConnectError("Connection refused"))
        api = make_api()
        with pytest.raises(PayPalError) as exc_info:
            api.send(api.new_request("GET", f"{BASE_URL}/x"))
        assert exc_info.value.code == PayPalErrorCodes.HTTP_ERROR
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
