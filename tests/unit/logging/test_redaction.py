"""Tests for key-driven redaction."""

from __future__ import annotations

from functools import partial

import pytest

from logging_lib.metrics import get_metrics
from logging_lib.redaction import MASK, access_log_redactor, broadcast_redactor, redact


BROADCAST = broadcast_redactor()


def _nested_payload() -> dict:
    return {
        "user": "alice",
        "password": "hunter2",
        "nested": {"api_key": "k-123", "region": "eu", "deeper": {"Authorization": "Bearer x"}},
    }


def _list_payload() -> dict:
    return {"items": [{"token": "t1"}, {"name": "ok"}, "plain"]}


def _deep_payload(depth: int = 5000) -> dict:
    payload: dict = {"password": "root"}
    cursor = payload
    for _ in range(depth):
        cursor["child"] = {"password": "x"}
        cursor = cursor["child"]
    return payload


def test_nested_sensitive_keys_are_masked_and_others_untouched():
    result = BROADCAST.apply(_nested_payload())

    assert result == {
        "user": "alice",
        "password": MASK,
        "nested": {"api_key": MASK, "region": "eu", "deeper": {"Authorization": MASK}},
    }


def test_matching_is_case_insensitive_substring():
    result = BROADCAST.apply({"X-Api-Key": "a", "resetToken": "b", "SESSION_COOKIE": "c", "tokenizer": "d"})

    assert result["resetToken"] == MASK
    assert result["SESSION_COOKIE"] == MASK
    # "tokenizer" contains "token"
    assert result["tokenizer"] == MASK
    # "x-api-key" contains neither "api_key" nor "apikey"
    assert result["X-Api-Key"] == "a"


def test_sensitive_key_masks_whole_subtree():
    result = BROADCAST.apply({"secret": {"inner": "value"}})

    assert result == {"secret": MASK}


def test_lists_are_walked():
    result = BROADCAST.apply(_list_payload())

    assert result == {"items": [{"token": MASK}, {"name": "ok"}, "plain"]}


def test_non_string_keys_are_never_sensitive():
    result = BROADCAST.apply({1: "one", ("password",): "tuple-key"})

    assert result == {1: "one", ("password",): "tuple-key"}


def test_input_is_not_mutated():
    payload = {"password": "p", "nested": {"ssn": "123"}}

    BROADCAST.apply(payload)

    assert payload == {"password": "p", "nested": {"ssn": "123"}}


def test_scalars_pass_through():
    assert redact("password", ["password"]) == "password"
    assert redact(None, ["password"]) is None


def test_deeply_nested_payload_does_not_hit_recursion_limit():
    result = BROADCAST.apply(_deep_payload())

    assert result["password"] == MASK
    assert result["child"]["child"]["password"] == MASK


def test_access_log_denylist_is_narrower():
    access = access_log_redactor()

    result = access.apply({"password": "p", "_token": "csrf", "cookie": "c", "api_key": "k"})

    assert result["password"] == MASK
    assert result["_token"] == MASK
    assert result["cookie"] == "c"
    assert result["api_key"] == "k"


def test_redaction_is_counted_in_metrics():
    BROADCAST.apply({"password": "a", "secret": "b", "name": "c"})

    assert get_metrics().redacted_total == 2


# deep case stays under the interpreter limit for recursive dict equality
@pytest.mark.parametrize(
    "build", [_nested_payload, _list_payload, partial(_deep_payload, 300)], ids=["nested", "list", "deep"]
)
@pytest.mark.parametrize("redactor", [broadcast_redactor(), access_log_redactor()], ids=["broadcast", "access_log"])
def test_redaction_is_idempotent(build, redactor):
    once = redactor.apply(build())

    assert redactor.apply(once) == once
