# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
eazycontroller transport server.

One aiohttp application on a single port:

  GET /ws       WebSocket — request/response commands plus media push
  GET /health   plain "OK" for load balancers and the systemd unit
  GET /*        the web UI (single-page app, unknown paths → index.html)

``ControllerServer`` owns every long-lived component and wires them
together: provider → bridge/cache → media sessions → monitor → hub →
connections.
"""

import asyncio
import json
import logging
import signal
from concurrent.futures import ThreadPoolExecutor

from aiohttp import WSMsgType, web

from .dispatcher import MessageDispatcher, decode_message
from .errors import ProtocolError
from .hub import BroadcastHub, Subscription
from .lib.assets import AssetStore
from .lib.config import cfg
from .lib.discovery import INSTANCE_NAME, SERVICE_TYPE, ServiceAdvertiser
from .lib.watchdog import watchdog_loop
from .media.cache import SessionCache
from .media.monitor import BROWSER_APPS, POLL_INTERVAL, MediaMonitor
from .media.sessions import CACHE_MAX_AGE, MediaSessions
from .providers import ProviderBridge, StateProvider, create_provider

log = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8800

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@web.middleware
async def cors_middleware(request, handler):
    if request.method == "OPTIONS":
        resp = web.Response()
    else:
        resp = await handler(request)
    resp.headers["Access-Control-Allow-Origin"] = "*"
    resp.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    resp.headers["Access-Control-Allow-Headers"] = "*"
    return resp


class ControllerServer:
    def __init__(self, host: str | None = None, port: int | None = None,
                 provider: StateProvider | None = None,
                 assets: AssetStore | None = None, static_dir: str | None = None,
                 discovery: bool | None = None):
        self.host = host or cfg("server", "host", default=DEFAULT_HOST)
        self.port = int(port or cfg("server", "port", default=DEFAULT_PORT))
        self.discovery_enabled = (
            cfg("discovery", "enabled", default=True) if discovery is None else discovery)

        self.provider = provider or create_provider()
        self.executor = ThreadPoolExecutor(
            max_workers=int(cfg("provider", "workers", default=4)),
            thread_name_prefix="provider")
        self.bridge = ProviderBridge(self.provider, self.executor)
        self.cache = SessionCache()
        self.media = MediaSessions(
            self.provider, self.cache, self.executor,
            max_age=float(cfg("media", "cache_max_age", default=CACHE_MAX_AGE)))
        self.hub = BroadcastHub(int(cfg("server", "ws_queue_size", default=100)))
        self.dispatcher = MessageDispatcher(self.bridge, self.media)
        self.monitor = MediaMonitor(
            self.media, self.hub,
            interval=float(cfg("media", "poll_interval", default=POLL_INTERVAL)),
            browser_apps=cfg("media", "browser_apps", default=BROWSER_APPS))
        self.assets = assets if assets is not None else AssetStore.from_config(static_dir)
        self.advertiser = ServiceAdvertiser(
            self.port,
            instance_name=cfg("discovery", "instance_name", default=INSTANCE_NAME),
            service_type=cfg("discovery", "service_type", default=SERVICE_TYPE))

        self._clients: set[web.WebSocketResponse] = set()
        self._runner: web.AppRunner | None = None
        self._watchdog_task: asyncio.Task | None = None

    # ── Application ──

    def create_app(self) -> web.Application:
        app = web.Application(middlewares=[cors_middleware])
        app.router.add_get("/ws", self._handle_ws)
        app.router.add_get("/health", self._handle_health)
        app.router.add_get("/{tail:.*}", self._handle_static)
        app.on_shutdown.append(self._close_clients)
        return app

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.Response(text="OK")

    async def _handle_static(self, request: web.Request) -> web.Response:
        if self.assets is None:
            return web.Response(status=404, text="404 Not Found")
        asset = self.assets.get(request.match_info["tail"]) or self.assets.index()
        if asset is None:
            return web.Response(status=404, text="404 Not Found")
        return web.Response(body=asset.body, content_type=asset.content_type,
                            headers=NO_CACHE_HEADERS)

    # ── WebSocket ──

    async def _handle_ws(self, request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse(autoping=True)
        await ws.prepare(request)

        peer = request.remote
        sub = self.hub.subscribe()
        outbound: asyncio.Queue[str] = asyncio.Queue(maxsize=self.hub.queue_size)
        forward = asyncio.create_task(self._forward(sub, outbound))
        writer = asyncio.create_task(self._write(ws, outbound))
        self._clients.add(ws)
        log.info("Client connected: %s (%d total)", peer, len(self._clients))

        try:
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    reply = await self._handle_text(msg.data)
                    if reply is not None:
                        await outbound.put(json.dumps(reply))
                elif msg.type == WSMsgType.ERROR:
                    log.warning("WebSocket error from %s: %s", peer, ws.exception())
                    break
                # binary frames are ignored
        finally:
            # aiohttp may cancel this handler on disconnect; release before awaiting
            self.hub.unsubscribe(sub)
            self._clients.discard(ws)
            forward.cancel()
            writer.cancel()
            log.info("Client disconnected: %s (%d remaining)", peer, len(self._clients))
            await asyncio.gather(forward, writer, return_exceptions=True)

        return ws

    async def _handle_text(self, text: str) -> dict | None:
        try:
            msg = decode_message(text)
        except ProtocolError as e:
            log.debug("Rejected frame: %s", e)
            return {"type": "error", "message": str(e)}
        log.debug("Received %s", msg.get("type") if isinstance(msg, dict) else type(msg).__name__)
        try:
            return await self.dispatcher.handle_message(msg)
        except Exception:
            log.exception("Unhandled error while dispatching message")
            return None

    async def _forward(self, sub: Subscription, outbound: asyncio.Queue):
        """Hub subscription → this connection's outbound queue."""
        while True:
            await outbound.put(await sub.get())

    async def _write(self, ws: web.WebSocketResponse, outbound: asyncio.Queue):
        """Sole writer for *ws*, so frames go out in queue order.

        Keeps draining after the socket dies so producers never block on a
        full queue; the receive loop notices the close and cancels us.
        """
        while True:
            text = await outbound.get()
            if ws.closed:
                continue
            try:
                await ws.send_str(text)
            except (ConnectionError, RuntimeError) as e:
                log.debug("Send failed: %s", e)

    async def _close_clients(self, app: web.Application):
        for ws in list(self._clients):
            await ws.close(code=1001, message=b"Server shutdown")

    # ── Lifecycle ──

    async def start(self):
        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        log.info("eazycontroller listening on %s:%d (ws://%s:%d/ws)",
                 self.host, self.port, self.host, self.port)

        self.monitor.start()

        if self.discovery_enabled:
            await self.advertiser.start()

        self._watchdog_task = asyncio.create_task(
            watchdog_loop(alive=self.monitor.is_alive))

    async def run(self):
        """Start, wait for SIGINT/SIGTERM, shut down."""
        await self.start()
        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, stop_event.set)
        try:
            await stop_event.wait()
            log.info("Shutdown requested")
        finally:
            await self.shutdown()

    async def shutdown(self):
        if self._watchdog_task:
            self._watchdog_task.cancel()
            await asyncio.gather(self._watchdog_task, return_exceptions=True)
            self._watchdog_task = None

        await self.advertiser.close()

        if self._runner:
            await self._runner.cleanup()
            self._runner = None

        self.executor.shutdown(wait=False, cancel_futures=True)
        self.provider.close()
        log.info("eazycontroller stopped")
