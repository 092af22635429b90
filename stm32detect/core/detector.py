"""STM32 identification over the OpenOCD telnet port."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stm32detect.core.device_table import DeviceTable, device_table
from stm32detect.core.errors import TransportError, TransportReceiveError, TransportSendError
from stm32detect.core.model import DetectionResult, ProbeAttempt, ProbeSettings
from stm32detect.core.protocol import (
    IDCODE_ADDRESSES,
    device_id,
    format_read_command,
    is_response_complete,
    is_sentinel,
    normalize_response,
    parse_idcode,
)
from stm32detect.transports.base import Connection, Transport
from stm32detect.transports.tcp import TCPTransport

LOGGER = logging.getLogger(__name__)

UNSUPPORTED_DEVICE = "Unknown or unsupported STM32 device"


@dataclass(frozen=True)
class _Match:
    idcode: int
    device_id: int
    config_file: str
    address: int


class Stm32Detector:
    """Identify the attached STM32 through a running OpenOCD telnet server.

    One `detect` call owns one connection from open to close. Commands are
    strictly sequential: a read is written, its answer is polled for within
    the configured attempt budget, then the next address is tried.
    """

    def __init__(
        self,
        settings: ProbeSettings | None = None,
        *,
        transport: Transport | None = None,
        table: DeviceTable | None = None,
        addresses: tuple[int, ...] = IDCODE_ADDRESSES,
    ) -> None:
        self.settings = settings or ProbeSettings()
        self.transport = transport or TCPTransport()
        self.table = table or device_table()
        self.addresses = addresses

    def detect(self, port: int | None = None) -> DetectionResult:
        settings = self.settings
        port = settings.port if port is None else port

        try:
            connection = self.transport.connect(
                settings.host,
                port,
                timeout_s=settings.connect_timeout_s,
            )
        except TransportError as exc:
            message = f"Failed to connect to OpenOCD on {settings.host}:{port}: {exc}"
            LOGGER.warning(message)
            return DetectionResult(success=False, error=message)

        LOGGER.debug("Connected to OpenOCD on %s:%d", settings.host, port)
        try:
            return self._identify(connection)
        finally:
            connection.close()

    def _identify(self, connection: Connection) -> DetectionResult:
        banner = self._drain_banner(connection)
        probes: list[ProbeAttempt] = []
        error = ""
        match: _Match | None = None

        for address in self.addresses:
            command = format_read_command(address)
            LOGGER.debug("Sending: %s", command.decode("ascii").strip())
            try:
                connection.write(command)
            except TransportSendError as exc:
                error = f"Failed to send '{command.decode('ascii').strip()}' to OpenOCD: {exc}"
                LOGGER.warning(error)
                break

            probe = self._poll_response(connection, address)
            probes.append(probe)
            match = self._match(probe)
            if match is not None:
                break

        if match is None:
            if not error:
                error = UNSUPPORTED_DEVICE
                LOGGER.warning("%s (probed %d addresses)", error, len(probes))
            return DetectionResult(success=False, error=error, banner=banner, probes=tuple(probes))

        LOGGER.info(
            "Detected device 0x%03X (IDCODE 0x%08X at 0x%08X) -> %s",
            match.device_id,
            match.idcode,
            match.address,
            match.config_file,
        )
        return DetectionResult(
            success=True,
            device_id=match.device_id,
            config_file=match.config_file,
            idcode=match.idcode,
            address=match.address,
            banner=banner,
            probes=tuple(probes),
        )

    def _drain_banner(self, connection: Connection) -> str:
        try:
            raw = connection.read(timeout_s=self.settings.recv_timeout_s)
        except TransportReceiveError as exc:
            LOGGER.debug("No banner: %s", exc)
            return ""
        if not raw:
            LOGGER.debug("No banner received")
            return ""
        LOGGER.debug("Banner raw bytes: %s", raw.hex(" "))
        return normalize_response(raw)

    def _poll_response(self, connection: Connection, address: int) -> ProbeAttempt:
        buffer = bytearray()
        text = ""
        complete = False
        attempts = 0

        while attempts < self.settings.read_attempts:
            attempts += 1
            try:
                chunk = connection.read(timeout_s=self.settings.poll_interval_s)
            except TransportReceiveError as exc:
                LOGGER.debug("Read error at 0x%08X: %s", address, exc)
                break
            if chunk is None:
                continue
            if not chunk:
                LOGGER.debug("Connection closed by OpenOCD while waiting for 0x%08X", address)
                break

            buffer.extend(chunk)
            text = normalize_response(bytes(buffer))
            if is_response_complete(text):
                complete = True
                break

        idcode = parse_idcode(text)
        LOGGER.debug("Response for 0x%08X after %d attempts: %r", address, attempts, text)
        if idcode is not None:
            LOGGER.debug("Parsed: 0x%08X, devId: 0x%03X", idcode, device_id(idcode))
        return ProbeAttempt(
            address=address,
            response=text,
            complete=complete,
            attempts=attempts,
            idcode=idcode,
        )

    def _match(self, probe: ProbeAttempt) -> _Match | None:
        if probe.idcode is None or is_sentinel(probe.idcode):
            return None
        dev_id = device_id(probe.idcode)
        config_file = self.table.config_for(dev_id)
        if config_file is None:
            LOGGER.debug("Device ID 0x%03X at 0x%08X is not in the table", dev_id, probe.address)
            return None
        return _Match(
            idcode=probe.idcode,
            device_id=dev_id,
            config_file=config_file,
            address=probe.address,
        )


def detect_stm32(
    port: int | None = None,
    *,
    settings: ProbeSettings | None = None,
    transport: Transport | None = None,
) -> DetectionResult:
    """Run one detection against the OpenOCD telnet server on ``port``."""
    return Stm32Detector(settings, transport=transport).detect(port)
