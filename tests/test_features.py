from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from consulkit import ApiResponse, Blocking, ConsistencyMode, F, Features
from consulkit.api.features import apply_features
from consulkit.clients.pipeline import ConsulRequest


def _request() -> ConsulRequest:
    return ConsulRequest(method="GET", url="http://127.0.0.1:8500/v1/kv/foo")


def test_no_features_adds_nothing() -> None:
    req = _request()
    apply_features(Features(), req)
    assert req.params == []
    assert req.headers == []


def test_param_order_is_pairs_then_bare_keys() -> None:
    req = _request()
    features = Features(
        blocking=Blocking(index=42, wait="30s"),
        cached="",
        filter='Service == "web"',
        mode=ConsistencyMode.STALE,
    )
    apply_features(features, req)
    assert req.params == [
        ("index", "42"),
        ("wait", "30s"),
        ("filter", 'Service == "web"'),
        ("cached", None),
        ("stale", None),
    ]


def test_blocking_without_wait_only_sends_index() -> None:
    req = _request()
    apply_features(Features(blocking=Blocking(index=7)), req)
    assert req.params == [("index", "7")]


def test_cached_empty_sets_flag_without_cache_control() -> None:
    req = _request()
    apply_features(Features(cached=""), req)
    assert req.params == [("cached", None)]
    assert req.header("Cache-Control") is None


def test_cached_with_directives_sets_cache_control_header() -> None:
    req = _request()
    apply_features(Features(cached="max-age=30"), req)
    assert req.params == [("cached", None)]
    assert req.header("Cache-Control") == "max-age=30"


def test_consistent_mode_is_bare_key() -> None:
    req = _request()
    apply_features(Features(mode=ConsistencyMode.CONSISTENT), req)
    assert req.params == [("consistent", None)]


def test_existing_params_are_kept_before_features() -> None:
    req = _request()
    req.params.append(("dc", "dc1"))
    apply_features(Features(mode=ConsistencyMode.STALE), req)
    assert req.params == [("dc", "dc1"), ("stale", None)]


def test_filter_accepts_builder_expression() -> None:
    features = Features(filter=F.selector("Service").equals("web"))
    assert features.filter == 'Service == "web"'


def test_blocking_index_bounds() -> None:
    Blocking(index=2**64 - 1)
    with pytest.raises(ValidationError):
        Blocking(index=-1)
    with pytest.raises(ValidationError):
        Blocking(index=2**64)


def test_blocking_after_uses_response_index() -> None:
    resp = ApiResponse(response=[], index="1234")
    blocking = Blocking.after(resp, wait="5m")
    assert blocking.index == 1234
    assert blocking.wait == "5m"


def test_blocking_after_requires_index() -> None:
    with pytest.raises(ValueError):
        Blocking.after(ApiResponse(response=None))


def test_apply_features_logs_param_names(caplog: pytest.LogCaptureFixture) -> None:
    req = _request()
    with caplog.at_level(logging.INFO, logger="consulkit.api.features"):
        apply_features(Features(filter="secret-value", mode=ConsistencyMode.STALE), req)
    messages = " ".join(r.getMessage() for r in caplog.records)
    assert "filter" in messages
    assert "stale" in messages
    assert "secret-value" not in messages
