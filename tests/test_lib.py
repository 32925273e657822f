"""Discovery, static assets, watchdog and CLI plumbing."""

from __future__ import annotations

import asyncio
import socket
from pathlib import Path

import pytest

import eazycontroller

from eazycontroller.__main__ import parse_args
from eazycontroller.lib.assets import AssetStore
from eazycontroller.lib.discovery import ServiceAdvertiser, is_usable_address
from eazycontroller.lib.watchdog import sd_notify, watchdog_loop


# ── Discovery ──

@pytest.mark.parametrize("ip, expected", [
    ("192.168.1.20", True),
    ("10.0.0.7", True),
    ("127.0.0.1", False),
    ("0.0.0.0", False),
    (None, False),
    ("fe80::1", False),
])
def test_usable_address(ip, expected) -> None:
    assert is_usable_address(ip) is expected


async def test_advertisement_skipped_without_lan_address() -> None:
    advertiser = ServiceAdvertiser(8800, address_lookup=lambda: "127.0.0.1")

    assert await advertiser.start() is False
    assert not advertiser.registered
    await advertiser.close()


def test_service_info_describes_http_service() -> None:
    info = ServiceAdvertiser(8800).build_info("192.168.1.20")

    assert info.type == "_http._tcp.local."
    assert info.name == "eazycontroller._http._tcp.local."
    assert info.port == 8800
    assert info.parsed_addresses() == ["192.168.1.20"]


# ── Assets ──

@pytest.fixture
def web_root(tmp_path: Path) -> Path:
    root = tmp_path / "web"
    (root / "assets").mkdir(parents=True)
    (root / "index.html").write_text("<html></html>")
    (root / "assets" / "style.css").write_text("body{}")
    (tmp_path / "secret.txt").write_text("nope")
    return root


def test_asset_lookup(web_root: Path) -> None:
    store = AssetStore(web_root)

    css = store.get("/assets/style.css")
    assert css.body == b"body{}"
    assert css.content_type == "text/css"
    assert store.get("") == store.index()
    assert store.get("missing.png") is None


def test_asset_path_traversal_is_refused(web_root: Path) -> None:
    assert AssetStore(web_root).get("../secret.txt") is None


def test_asset_store_from_config(web_root: Path, tmp_path: Path) -> None:
    assert AssetStore.from_config(None) is None
    assert AssetStore.from_config(str(tmp_path / "absent")) is None
    assert AssetStore.from_config(str(web_root)).root == web_root.resolve()


# ── Watchdog ──

def test_sd_notify_without_socket() -> None:
    assert sd_notify("READY=1") is False


def test_sd_notify_sends_datagram(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "notify"
    listener = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    listener.bind(str(path))
    try:
        monkeypatch.setenv("NOTIFY_SOCKET", str(path))

        assert sd_notify("WATCHDOG=1") is True
        assert listener.recv(64) == b"WATCHDOG=1"
    finally:
        listener.close()


async def test_watchdog_stops_when_not_alive() -> None:
    beats = []

    def alive() -> bool:
        beats.append(1)
        return len(beats) < 3

    await asyncio.wait_for(watchdog_loop(interval=0.01, alive=alive), 2)

    assert len(beats) == 3


# ── CLI ──

def test_cli_arguments() -> None:
    args = parse_args(["--port", "9000", "--no-discovery", "--provider", "unsupported"])

    assert args.port == 9000
    assert args.no_discovery
    assert args.provider == "unsupported"
    assert args.host is None


def test_cli_rejects_unknown_provider() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--provider", "alsa"])


# ── Source headers ──

def test_module_headers_name_project_licence() -> None:
    package = Path(eazycontroller.__file__).parent
    modules = [p for p in package.rglob("*.py") if p.name != "__init__.py"]
    assert modules

    for path in modules:
        head = path.read_text(encoding="utf-8").splitlines()[:3]
        assert head == [
            "# eazycontroller",
            "# Copyright (C) 2026 eazycontroller contributors",
            "# SPDX-License-Identifier: GPL-3.0-or-later",
        ], path
