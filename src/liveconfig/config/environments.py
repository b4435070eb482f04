"""
liveconfig Environment Discovery

Determines the server hostname and a routable IPv4 address, walking a chain
of fallbacks for each:

- Hostname: environment variable -> OS hostname -> hostname utility
- IP address: local interfaces (non link-local first) -> DNS -> loopback
"""

import asyncio
import ipaddress
import os
import socket
from dataclasses import dataclass
from typing import Any

import psutil

from liveconfig.config.constants import LINK_LOCAL_PREFIX, LOOPBACK_ADDRESS
from liveconfig.config.settings import get_settings
from liveconfig.utils.decorators import timeout_async
from liveconfig.utils.exceptions import EnvironmentDiscoveryError, TimeoutError
from liveconfig.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class EnvironmentInfo:
    """Discovered server identity."""
    hostname: str
    ip: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"hostname": self.hostname, "ip": self.ip}


async def get_hostname() -> str:
    """Determine the server hostname, lower-cased."""
    settings = get_settings()

    for var in settings.hostname_env_vars:
        hostname = os.getenv(var, "").strip().lower()
        if hostname:
            return hostname

    hostname = socket.gethostname().strip().lower()
    if hostname:
        return hostname

    # The hard way: exec the hostname binary
    logger.debug("hostname_fallback", method="exec", command=settings.hostname_command)
    try:
        proc = await asyncio.create_subprocess_exec(
            settings.hostname_command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, _ = await proc.communicate()
    except OSError as e:
        raise EnvironmentDiscoveryError(
            f"Failed to determine server hostname via {settings.hostname_command}: {e}",
            method="exec",
        ) from e

    hostname = stdout.decode("utf-8", errors="replace").strip().lower()
    if not hostname:
        raise EnvironmentDiscoveryError(
            f"Failed to determine server hostname via {settings.hostname_command}",
            method="exec",
        )
    return hostname


def _interface_candidates() -> list[str]:
    """Collect non-internal IPv4 addresses from local interfaces, in order."""
    candidates = []
    for addrs in psutil.net_if_addrs().values():
        for addr in addrs:
            if addr.family != socket.AF_INET or not addr.address:
                continue
            try:
                ip = ipaddress.IPv4Address(addr.address)
            except ValueError:
                continue
            if ip.is_loopback:
                continue
            candidates.append(str(ip))
    return candidates


@timeout_async(lambda: get_settings().dns_timeout_seconds)
async def _resolve4(hostname: str) -> str | None:
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(hostname, None, family=socket.AF_INET, type=socket.SOCK_STREAM)
    for info in infos:
        return info[4][0]
    return None


async def get_ip_address(hostname: str) -> str:
    """Determine the server IPv4 address. Never raises."""
    candidates = _interface_candidates()

    for address in candidates:
        if not address.startswith(LINK_LOCAL_PREFIX):
            return address

    # Link-local is only accepted once every other candidate is ruled out
    if candidates:
        logger.debug("ip_fallback", method="link_local", address=candidates[0])
        return candidates[0]

    logger.debug("ip_fallback", method="dns", hostname=hostname)
    try:
        address = await _resolve4(hostname)
    except (OSError, UnicodeError, TimeoutError) as e:
        logger.warning("dns_resolution_failed", hostname=hostname, error=str(e))
        address = None

    return address or LOOPBACK_ADDRESS


async def get_env() -> EnvironmentInfo:
    """Determine hostname, then IP address."""
    hostname = await get_hostname()
    ip = await get_ip_address(hostname)
    logger.info("environment_discovered", hostname=hostname, ip=ip)
    return EnvironmentInfo(hostname=hostname, ip=ip)
