# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Systemd watchdog heartbeat for the controller service.

Sends WATCHDOG=1 to the systemd notify socket at regular intervals, but only
while the supplied liveness check passes.  If the media monitor thread ever
dies the heartbeat stops and systemd restarts the service.

Silently no-ops when NOTIFY_SOCKET is unset (dev mode, tests).
"""

import asyncio
import logging
import os
import socket
from collections.abc import Callable

logger = logging.getLogger(__name__)


def sd_notify(msg: str) -> bool:
    """Send a notification message to the systemd notify socket.

    Returns True if a datagram was sent.
    """
    addr = os.environ.get("NOTIFY_SOCKET")
    if not addr:
        return False
    if addr[0] == "@":
        addr = "\0" + addr[1:]
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    try:
        sock.sendto(msg.encode(), addr)
        return True
    except OSError as e:
        logger.debug("sd_notify(%s) failed: %s", msg.split("\n")[0], e)
        return False
    finally:
        sock.close()


async def watchdog_loop(interval: float = 20, alive: Callable[[], bool] | None = None):
    """Send READY=1, then WATCHDOG=1 every *interval* seconds while *alive()*.

    Call as asyncio.create_task().  Returns when *alive* reports False.
    """
    sd_notify("READY=1")
    logger.info("Watchdog started (interval=%ss)", interval)
    while alive is None or alive():
        sd_notify("WATCHDOG=1")
        await asyncio.sleep(interval)
    logger.error("Media monitor is no longer running — stopping watchdog, systemd will restart us")
