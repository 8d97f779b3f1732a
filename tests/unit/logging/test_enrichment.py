"""Tests for record enrichment."""

from __future__ import annotations

from types import SimpleNamespace

from flask import Flask, g

from logging_lib.context import correlation_scope
from logging_lib.enrichment import Enricher, enrich


def _record(**extra):
    return {"message": "m", "context": {"k": "v"}, "extra": dict(extra)}


def test_all_ambient_values_are_added_to_extra():
    enricher = Enricher(
        correlation_resolver=lambda: "cid-1",
        user_resolver=lambda: 42,
        request_resolver=lambda: ("10.0.0.1", "/api/things?x=1"),
    )

    enriched = enricher.enrich(_record(existing=True))

    assert enriched["extra"] == {
        "existing": True,
        "correlation_id": "cid-1",
        "user_id": 42,
        "ip_address": "10.0.0.1",
        "request_uri": "/api/things?x=1",
    }
    assert enriched["context"] == {"k": "v"}


def test_unavailable_values_are_omitted():
    enricher = Enricher(
        correlation_resolver=lambda: None,
        user_resolver=lambda: None,
        request_resolver=lambda: (None, None),
    )

    assert enricher.enrich(_record())["extra"] == {}


def test_failing_lookup_never_raises():
    def _boom():
        raise RuntimeError("no session")

    enricher = Enricher(
        correlation_resolver=lambda: "cid-2",
        user_resolver=_boom,
        request_resolver=_boom,
    )

    enriched = enricher.enrich(_record())

    assert enriched["extra"] == {"correlation_id": "cid-2"}


def test_input_record_is_not_mutated():
    record = _record()
    Enricher(correlation_resolver=lambda: "cid").enrich(record)

    assert record["extra"] == {}


def test_outside_request_only_correlation_is_known():
    with correlation_scope("background-1"):
        enriched = enrich(_record())

    assert enriched["extra"] == {"correlation_id": "background-1"}


def test_flask_request_values_are_resolved():
    app = Flask(__name__)

    with app.test_request_context(
        "/api/notifications?unread=1",
        headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.2"},
    ):
        g.current_user = SimpleNamespace(id="u-7")
        enriched = enrich(_record())

    assert enriched["extra"]["user_id"] == "u-7"
    assert enriched["extra"]["ip_address"] == "203.0.113.9"
    assert enriched["extra"]["request_uri"] == "/api/notifications?unread=1"
