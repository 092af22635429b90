"""Stable public API for building tooling on top of stm32detect.

This module is the supported integration surface for third-party callers
(debugger front-ends, launch scripts). Avoid importing from private/internal
modules unless intentionally depending on non-stable internals.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor

from stm32detect.core.detector import UNSUPPORTED_DEVICE, Stm32Detector
from stm32detect.core.device_table import DeviceTable, device_table
from stm32detect.core.errors import (
    DeviceTableError,
    SettingsError,
    Stm32DetectError,
    TransportConnectError,
    TransportError,
    TransportReceiveError,
    TransportSendError,
    TransportTimeoutError,
)
from stm32detect.core.model import DetectionResult, DeviceFamily, ProbeAttempt, ProbeSettings
from stm32detect.core.protocol import IDCODE_ADDRESSES
from stm32detect.core.settings import load_settings
from stm32detect.transports.base import Connection, Transport
from stm32detect.transports.tcp import TCPTransport

__all__ = [
    "Stm32DetectError",
    "DeviceTableError",
    "SettingsError",
    "TransportError",
    "TransportConnectError",
    "TransportReceiveError",
    "TransportSendError",
    "TransportTimeoutError",
    "DetectionResult",
    "DeviceFamily",
    "DeviceTable",
    "ProbeAttempt",
    "ProbeSettings",
    "IDCODE_ADDRESSES",
    "UNSUPPORTED_DEVICE",
    "Connection",
    "Transport",
    "TCPTransport",
    "Client",
]


class Client:
    """Public client for identifying the STM32 behind an OpenOCD telnet port.

    Each `detect` call is blocking and self-contained. Callers running an
    event loop should use `detect_in_background` and collect the result from
    the returned future instead of blocking their own thread.
    """

    def __init__(
        self,
        *,
        settings: ProbeSettings | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self._detector = Stm32Detector(self.settings, transport=transport)
        self._executor: ThreadPoolExecutor | None = None

    @property
    def table(self) -> DeviceTable:
        return device_table()

    def lookup(self, device_id: int) -> str | None:
        return self.table.config_for(device_id)

    def detect(self, port: int | None = None) -> DetectionResult:
        return self._detector.detect(port)

    def detect_in_background(self, port: int | None = None) -> Future[DetectionResult]:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="stm32detect")
        return self._executor.submit(self._detector.detect, port)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
