"""Core data models used across the detector, table loader, and CLI."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProbeSettings:
    host: str = "127.0.0.1"
    port: int = 4444
    connect_timeout_s: float = 3.0
    recv_timeout_s: float = 2.0
    read_attempts: int = 20
    poll_interval_s: float = 0.1

    @property
    def address_budget_s(self) -> float:
        """Worst-case time spent polling for the answer to one command."""
        return self.read_attempts * self.poll_interval_s


@dataclass(frozen=True)
class DeviceFamily:
    name: str
    config: str
    device_ids: tuple[int, ...]


@dataclass(frozen=True)
class ProbeAttempt:
    address: int
    response: str
    complete: bool
    attempts: int
    idcode: int | None


@dataclass(frozen=True)
class DetectionResult:
    success: bool
    device_id: int | None = None
    config_file: str | None = None
    error: str = ""
    idcode: int | None = None
    address: int | None = None
    banner: str = ""
    probes: tuple[ProbeAttempt, ...] = ()
