from __future__ import annotations

import base64
import dataclasses
import json
from collections.abc import Callable
from pathlib import Path

import pytest

pytest.importorskip("rich_click")
pytest.importorskip("rich")

import httpx
from click.testing import CliRunner

import consulkit
from consulkit import Consul
from consulkit.cli.main import cli
from consulkit.cli.render import RenderSettings, render_result
from consulkit.cli.results import CommandMeta, CommandResult, ErrorInfo

ENV = {
    "CONSUL_HTTP_ADDR": "http://consul.test:8500",
    "CONSUL_HTTP_TOKEN": None,
    "CONSUL_HTTP_TOKEN_FILE": None,
    "CONSUL_CACERT": None,
    "CONSUL_CAPATH": None,
    "CONSUL_CLIENT_CERT": None,
    "CONSUL_CLIENT_KEY": None,
    "CONSUL_HTTP_SSL_VERIFY": None,
}

Handler = Callable[[httpx.Request], httpx.Response]


def _use_handler(monkeypatch: pytest.MonkeyPatch, handler: Handler) -> list[httpx.Request]:
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    def factory(*, settings):  # type: ignore[no-untyped-def]
        transport = httpx.MockTransport(recording)
        return Consul(settings=dataclasses.replace(settings, transport=transport))

    monkeypatch.setattr("consulkit.cli.context.Consul", factory)
    return seen


def _no_network(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request: {request.method} {request.url}")


def _kv_body(key: str, value: bytes) -> list[dict[str, object]]:
    encoded = base64.b64encode(value).decode("ascii")
    return [{"Key": key, "Value": encoded, "Flags": 0, "CreateIndex": 4, "ModifyIndex": 9}]


def _invoke(args: list[str]):  # type: ignore[no-untyped-def]
    return CliRunner().invoke(cli, args, env=ENV)


# =============================================================================
# No-network commands
# =============================================================================


def test_no_args_shows_help() -> None:
    result = _invoke([])
    assert result.exit_code == 0
    assert "kv" in result.output
    assert "catalog" in result.output


def test_version_json_envelope(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_handler(monkeypatch, _no_network)
    result = _invoke(["--json", "version"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["ok"] is True
    assert payload["command"] == "version"
    assert payload["data"]["version"] == consulkit.__version__
    assert payload["meta"]["address"] is None
    assert "consul" not in payload["meta"]
    assert payload["error"] is None


def test_version_table_output() -> None:
    result = _invoke(["version"])
    assert result.exit_code == 0
    assert consulkit.__version__ in result.output


# =============================================================================
# Key/value
# =============================================================================


def test_kv_get_prints_raw_value(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_kv_body("app/name", b"hello"), request=request)

    seen = _use_handler(monkeypatch, handler)
    result = _invoke(["kv", "get", "app/name"])

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "hello"
    assert seen[0].url.path == "/v1/kv/app/name"


def test_kv_get_json_includes_consul_metadata(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=_kv_body("app/name", b"hello"),
            headers={"X-Consul-Index": "9", "X-Consul-KnownLeader": "true"},
            request=request,
        )

    _use_handler(monkeypatch, handler)
    result = _invoke(["kv", "get", "app/name", "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["data"]["value"] == "hello"
    assert payload["data"]["modifyIndex"] == 9
    assert payload["meta"]["consul"] == {"index": "9", "known_leader": "true"}
    assert payload["meta"]["address"] == "http://consul.test:8500"


def test_kv_get_passes_read_options(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_kv_body("app/name", b"x"), request=request)

    seen = _use_handler(monkeypatch, handler)
    result = _invoke(["kv", "get", "app/name", "--dc", "dc2", "--index", "5", "--wait", "2s"])

    assert result.exit_code == 0, result.output
    assert seen[0].url.query.decode() == "dc=dc2&index=5&wait=2s"


def test_kv_get_missing_key_exits_4(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, request=request)

    _use_handler(monkeypatch, handler)
    result = _invoke(["kv", "get", "nope"])

    assert result.exit_code == 4
    assert "Not found" in result.output


def test_permission_denied_exits_3_with_hint(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text="Permission denied", request=request)

    _use_handler(monkeypatch, handler)
    result = _invoke(["kv", "keys", "app/"])

    assert result.exit_code == 3
    assert "Permission denied" in result.output
    assert "ACL token" in result.output


def test_error_json_envelope(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="rpc error", request=request)

    _use_handler(monkeypatch, handler)
    result = _invoke(["--json", "kv", "keys"])

    assert result.exit_code == 5
    payload = json.loads(result.stdout)
    assert payload["ok"] is False
    assert payload["error"]["type"] == "server_error"
    assert payload["error"]["statusCode"] == 500
    assert payload["error"]["message"] == "rpc error"


def test_unreachable_agent_exits_1_with_hint(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _use_handler(monkeypatch, handler)
    result = _invoke(["kv", "keys"])

    assert result.exit_code == 1
    assert "Network error" in result.output
    assert "CONSUL_HTTP_ADDR" in result.output


def test_stale_and_consistent_is_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_handler(monkeypatch, _no_network)
    result = _invoke(["kv", "get", "k", "--stale", "--consistent"])
    assert result.exit_code == 2
    assert "mutually exclusive" in result.output


def test_wait_without_index_is_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_handler(monkeypatch, _no_network)
    result = _invoke(["kv", "keys", "--wait", "10s"])
    assert result.exit_code == 2


def test_kv_put_sends_value(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=True, request=request)

    seen = _use_handler(monkeypatch, handler)
    result = _invoke(["--json", "kv", "put", "app/name", "hello", "--flags", "7"])

    assert result.exit_code == 0, result.output
    assert seen[0].method == "PUT"
    assert seen[0].content == b"hello"
    assert seen[0].url.query.decode() == "flags=7"
    assert json.loads(result.stdout)["data"] == {"key": "app/name", "written": True, "bytes": 5}


def test_kv_put_failed_cas_exits_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=False, request=request)

    _use_handler(monkeypatch, handler)
    result = _invoke(["kv", "put", "app/name", "hello", "--cas", "3"])

    assert result.exit_code == 1
    assert "Write was not applied" in result.output


def test_kv_put_from_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    source = tmp_path / "blob.bin"
    source.write_bytes(b"\x00\x01\x02")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=True, request=request)

    seen = _use_handler(monkeypatch, handler)
    result = _invoke(["kv", "put", "blob", "--file", str(source)])

    assert result.exit_code == 0, result.output
    assert seen[0].content == b"\x00\x01\x02"


# =============================================================================
# Other command groups
# =============================================================================


def test_health_node_critical_exits_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        checks = [
            {"Node": "n1", "CheckID": "serfHealth", "Status": "passing"},
            {"Node": "n1", "CheckID": "disk", "Status": "critical", "Output": "full"},
        ]
        return httpx.Response(200, json=checks, request=request)

    _use_handler(monkeypatch, handler)
    result = _invoke(["health", "node", "n1"])

    assert result.exit_code == 1
    assert "disk" in result.output


def test_check_register_requires_one_kind(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_handler(monkeypatch, _no_network)
    result = _invoke(["check", "register", "mem"])
    assert result.exit_code == 2
    assert "exactly one" in result.output


def test_check_ttl_commands(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, request=request)

    seen = _use_handler(monkeypatch, handler)
    for name in ("pass", "warn", "fail"):
        result = _invoke(["check", name, "mem", "--note", "from test"])
        assert result.exit_code == 0, result.output

    assert [r.url.path for r in seen] == [
        "/v1/agent/check/pass/mem",
        "/v1/agent/check/warn/mem",
        "/v1/agent/check/fail/mem",
    ]
    assert seen[0].url.query.decode() == "note=from+test"


def test_session_info_missing_exits_4(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[], request=request)

    _use_handler(monkeypatch, handler)
    result = _invoke(["session", "info", "gone"])

    assert result.exit_code == 4
    assert "not found" in result.output


def test_snapshot_save_refuses_to_overwrite(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    target = tmp_path / "backup.snap"
    target.write_bytes(b"old")
    _use_handler(monkeypatch, _no_network)

    result = _invoke(["snapshot", "save", str(target)])

    assert result.exit_code == 2
    assert "--force" in result.output
    assert target.read_bytes() == b"old"


def test_snapshot_save_writes_archive(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    target = tmp_path / "backup.snap"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\x1f\x8barchive", request=request)

    _use_handler(monkeypatch, handler)
    result = _invoke(["snapshot", "save", str(target), "--stale"])

    assert result.exit_code == 0, result.output
    assert target.read_bytes() == b"\x1f\x8barchive"


# =============================================================================
# Rendering
# =============================================================================


def test_error_details_render_with_verbosity(capsys: pytest.CaptureFixture[str]) -> None:
    result = CommandResult(
        ok=False,
        command="kv put",
        data=None,
        warnings=[],
        meta=CommandMeta(duration_ms=0, address=None),
        error=ErrorInfo(
            type="usage_error",
            message="Pass either VALUE or --file, not both.",
            hint="Run `consulkit kv put --help`.",
            details={"key": "app/name"},
        ),
    )
    render_result(result, settings=RenderSettings(output="table", quiet=False, verbosity=1))
    captured = capsys.readouterr()
    assert "Usage error:" in captured.err
    assert "Hint:" in captured.err
    assert "app/name" in captured.err


def test_quiet_hides_error_details(capsys: pytest.CaptureFixture[str]) -> None:
    result = CommandResult(
        ok=False,
        command="kv get",
        meta=CommandMeta(duration_ms=0),
        error=ErrorInfo(type="not_found", message="missing", hint="check the key"),
    )
    render_result(result, settings=RenderSettings(output="table", quiet=True, verbosity=0))
    captured = capsys.readouterr()
    assert "Not found: missing" in captured.err
    assert "Hint" not in captured.err
