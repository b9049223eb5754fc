import json

import pytest

from exchanges.base_client import ExchangeCredentials
from exchanges.coinex.request import USER_AGENT, build_request
from exchanges.coinex.signing import sign

BASE_URL = "https://api.coinex.com/v1"
CREDENTIALS = ExchangeCredentials(access_id="X", secret_key="S")


def test_get_appends_canonical_query_without_secret():
    request = build_request(BASE_URL, "/market/deals", {"market": "BTCUSDT"}, "GET", CREDENTIALS, tonce=1000)

    assert request.url == f"{BASE_URL}/market/deals?access_id=X&market=BTCUSDT&tonce=1000"
    assert request.body is None
    assert "secret_key" not in request.url


def test_headers_carry_signature_of_complete_params():
    request = build_request(BASE_URL, "/market/deals", {"market": "BTCUSDT"}, "GET", CREDENTIALS, tonce=1000)

    assert request.headers == {
        "Content-Type": "application/json",
        "Accept": "*/*",
        "User-Agent": USER_AGENT,
        "authorization": sign({"market": "BTCUSDT", "access_id": "X", "tonce": 1000}, "S"),
    }


def test_post_serializes_params_as_json_body():
    params = {"market": "BTCUSDT", "type": "buy", "amount": "0.5", "price": "100", "account_id": 0}

    request = build_request(BASE_URL, "/order/limit", params, "POST", CREDENTIALS, tonce=1000)

    assert request.url == f"{BASE_URL}/order/limit"
    assert json.loads(request.body) == {**params, "access_id": "X", "tonce": 1000}


def test_delete_uses_query_string():
    request = build_request(
        BASE_URL, "/order/pending", {"market": "BTCUSDT", "id": "42"}, "delete", CREDENTIALS, tonce=1
    )

    assert request.method == "DELETE"
    assert request.url.endswith("/order/pending?access_id=X&id=42&market=BTCUSDT&tonce=1")
    assert request.body is None


def test_none_params_are_treated_as_empty():
    request = build_request(BASE_URL, "/balance/info", None, "GET", CREDENTIALS, tonce=5)

    assert request.url == f"{BASE_URL}/balance/info?access_id=X&tonce=5"


def test_caller_params_are_not_mutated():
    params = {"market": "BTCUSDT"}

    build_request(BASE_URL, "/market/deals", params, "GET", CREDENTIALS)

    assert params == {"market": "BTCUSDT"}


def test_tonce_defaults_to_current_milliseconds(mocker):
    mocker.patch("exchanges.coinex.request.time.time", return_value=1700000000.5)

    request = build_request(BASE_URL, "/balance/info", None, "GET", CREDENTIALS)

    assert request.url.endswith("tonce=1700000000500")


def test_unsupported_method_is_rejected():
    with pytest.raises(ValueError):
        build_request(BASE_URL, "/order/limit", {}, "PUT", CREDENTIALS)
