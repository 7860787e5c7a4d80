"""
Reachability probes.

Each probe implements the same interface:
- async probe(ip_address) -> ProbeResult

Probes:
- SimulatedProbe: deterministic results derived from the IP address
- PingProbe: a single ICMP echo through the system ping binary
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
import sys
import zlib
from abc import ABC, abstractmethod

from .._types import ProbeResult

logger = logging.getLogger(__name__)

# Windows: "time=12ms" or "time<1ms"; Linux/macOS: "time=12.3 ms"
_WINDOWS_TIME_RE = re.compile(r"time[=<](\d+)ms", re.IGNORECASE)
_POSIX_TIME_RE = re.compile(r"time=(\d+\.?\d*)\s*ms", re.IGNORECASE)


class ReachabilityProbe(ABC):
    """Base class for reachability probes."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of this probe."""
        pass

    @abstractmethod
    async def probe(self, ip_address: str) -> ProbeResult:
        """
        Check whether a host answers.

        Never raises for an unreachable host; returns an offline result.
        """
        pass


class SimulatedProbe(ReachabilityProbe):
    """
    Deterministic probe for development.

    Uses the last octet of the address: hosts whose octet is a multiple of
    ten are offline, the rest answer in 20-69 ms.
    """

    @property
    def name(self) -> str:
        return "simulate"

    @staticmethod
    def _last_octet(ip_address: str) -> int:
        last = ip_address.rsplit(".", 1)[-1]
        try:
            return int(last)
        except ValueError:
            # IPv6 or hostnames: hash to a stable pseudo-octet
            return zlib.crc32(ip_address.encode()) % 256

    async def probe(self, ip_address: str) -> ProbeResult:
        octet = self._last_octet(ip_address)
        is_online = octet % 10 != 0
        return ProbeResult(
            is_online=is_online,
            response_time=(octet % 50) + 20 if is_online else None,
        )


class PingProbe(ReachabilityProbe):
    """Probe a host with one ICMP echo using the system ping command."""

    def __init__(self, timeout_ms: int = 5000, platform: str = sys.platform):
        """
        Initialize ping probe.

        Args:
            timeout_ms: Per-host reply timeout in milliseconds
            platform: sys.platform value deciding the ping syntax
        """
        self.timeout_ms = timeout_ms
        self.is_windows = platform == "win32"

    @property
    def name(self) -> str:
        return "ping"

    def build_command(self, ip_address: str) -> list[str]:
        if self.is_windows:
            return ["ping", "-n", "1", "-w", str(self.timeout_ms), ip_address]
        return ["ping", "-c", "1", "-W", str(math.ceil(self.timeout_ms / 1000)), ip_address]

    def parse_output(self, output: str) -> ProbeResult:
        """Parse ping stdout into a probe result."""
        marker = "Reply from" if self.is_windows else "bytes from"
        is_online = marker in output

        pattern = _WINDOWS_TIME_RE if self.is_windows else _POSIX_TIME_RE
        match = pattern.search(output)
        response_time = round(float(match.group(1))) if match else None

        return ProbeResult(is_online=is_online, response_time=response_time)

    async def probe(self, ip_address: str) -> ProbeResult:
        cmd = self.build_command(ip_address)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(f"Cannot run ping: {e}")
            return ProbeResult(is_online=False)

        # Give the process a little longer than its own reply timeout
        deadline = self.timeout_ms / 1000 + 2
        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=deadline)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.debug(f"Ping to {ip_address} timed out after {deadline}s")
            return ProbeResult(is_online=False)

        if proc.returncode != 0:
            return ProbeResult(is_online=False)

        return self.parse_output(stdout.decode(errors="replace"))


def create_probe(probe_mode: str, timeout_ms: int = 5000) -> ReachabilityProbe:
    """Create the probe for a configured probe mode."""
    if probe_mode == "ping":
        return PingProbe(timeout_ms=timeout_ms)
    if probe_mode == "simulate":
        return SimulatedProbe()
    raise ValueError(f"Unknown probe mode: {probe_mode}")
