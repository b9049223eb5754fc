import hashlib
import itertools
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from exchanges.coinex.signing import canonical_query, format_value, sign, signature_payload
from exchanges.errors import ConfigError


def test_signature_payload_sorts_keys_and_appends_secret():
    params = {"tonce": 1000, "market": "BTCUSDT", "access_id": "X"}

    assert signature_payload(params, "S") == "access_id=X&market=BTCUSDT&tonce=1000&secret_key=S"


def test_sign_is_uppercase_md5_of_payload():
    params = {"market": "BTCUSDT", "access_id": "X", "tonce": 1000}
    expected = hashlib.md5(
        b"access_id=X&market=BTCUSDT&tonce=1000&secret_key=S"
    ).hexdigest().upper()

    signature = sign(params, "S")

    assert signature == expected
    assert len(signature) == 32
    assert signature == signature.upper()


def test_canonical_query_ignores_insertion_order():
    items = [("market", "BTCUSDT"), ("limit", 50), ("merge", Decimal("0.1")), ("access_id", "X")]
    outputs = {canonical_query(dict(perm)) for perm in itertools.permutations(items)}
    signatures = {sign(dict(perm), "secret") for perm in itertools.permutations(items)}

    assert outputs == {"access_id=X&limit=50&market=BTCUSDT&merge=0.1"}
    assert len(signatures) == 1


def test_sign_changes_with_any_value():
    params = {"market": "BTCUSDT", "access_id": "X", "tonce": 1000}
    baseline = sign(params, "S")

    assert sign({**params, "tonce": 1001}, "S") != baseline
    assert sign({**params, "market": "BTCUSDC"}, "S") != baseline
    assert sign(params, "T") != baseline


def test_secret_is_not_in_signature():
    assert "topsecret" not in sign({"a": 1}, "topsecret")


def test_sign_without_secret_fails_closed():
    with pytest.raises(ConfigError):
        sign({"a": 1}, "")


def test_sign_fails_closed_when_digest_unavailable(mocker):
    mocker.patch("exchanges.coinex.signing.hashlib.new", side_effect=ValueError("unsupported hash type md5"))

    with pytest.raises(ConfigError, match="unavailable"):
        sign({"a": 1}, "S")


def test_format_value_renders_wire_strings():
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(Decimal("1E-8")) == "0.00000001"
    assert format_value(datetime(2020, 1, 1, tzinfo=timezone.utc)) == "1577836800000"
    assert format_value(0) == "0"


def test_canonical_query_of_empty_mapping_is_empty():
    assert canonical_query({}) == ""
