# eazycontroller
# Copyright (C) 2026 eazycontroller contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""mDNS advertisement so phones on the LAN can find the controller.

Registers ``<instance>._http._tcp.local.`` pointing at this host's LAN
address.  Entirely best effort: if there is no usable address or zeroconf
fails, the server keeps running and clients have to be given the IP.
"""

import ipaddress
import logging
import socket

from zeroconf.asyncio import AsyncServiceInfo, AsyncZeroconf

log = logging.getLogger(__name__)

SERVICE_TYPE = "_http._tcp.local."
INSTANCE_NAME = "eazycontroller"


def get_local_ip() -> str | None:
    """IPv4 address of the interface that routes outward, or None.

    Connecting a UDP socket sends nothing; it only makes the kernel pick a
    source address.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(("8.8.8.8", 80))
        return s.getsockname()[0]
    except OSError as e:
        log.debug("Local address lookup failed: %s", e)
        return None
    finally:
        s.close()


def is_usable_address(ip: str | None) -> bool:
    if not ip:
        return False
    try:
        addr = ipaddress.IPv4Address(ip)
    except ValueError:
        return False
    return not (addr.is_loopback or addr.is_unspecified)


class ServiceAdvertiser:
    def __init__(self, port: int, instance_name: str = INSTANCE_NAME,
                 service_type: str = SERVICE_TYPE, address_lookup=get_local_ip):
        self.port = port
        self.instance_name = instance_name
        self.service_type = service_type
        self._address_lookup = address_lookup
        self._zeroconf: AsyncZeroconf | None = None
        self._info: AsyncServiceInfo | None = None

    @property
    def registered(self) -> bool:
        return self._info is not None

    def build_info(self, ip: str) -> AsyncServiceInfo:
        hostname = socket.gethostname().split(".")[0] or self.instance_name
        return AsyncServiceInfo(
            self.service_type,
            f"{self.instance_name}.{self.service_type}",
            addresses=[socket.inet_aton(ip)],
            port=self.port,
            properties={"path": "/", "ws": "/ws"},
            server=f"{hostname}.local.",
        )

    async def start(self) -> bool:
        """Register the service. Returns False (and logs) if it could not."""
        ip = self._address_lookup()
        if not is_usable_address(ip):
            log.warning("No usable LAN address (%s) — mDNS advertisement skipped", ip)
            return False

        info = self.build_info(ip)
        try:
            self._zeroconf = AsyncZeroconf()
            await self._zeroconf.async_register_service(info)
        except Exception as e:
            log.warning("mDNS registration failed: %s", e)
            await self._close_zeroconf()
            return False

        self._info = info
        log.info("mDNS: %s at %s:%d", info.name, ip, self.port)
        return True

    async def close(self):
        if self._zeroconf and self._info:
            try:
                await self._zeroconf.async_unregister_service(self._info)
            except Exception as e:
                log.debug("mDNS unregister failed: %s", e)
        self._info = None
        await self._close_zeroconf()

    async def _close_zeroconf(self):
        if self._zeroconf is None:
            return
        try:
            await self._zeroconf.async_close()
        except Exception as e:
            log.debug("Zeroconf close failed: %s", e)
        self._zeroconf = None
