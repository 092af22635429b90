"""Domain-specific errors for stm32detect."""


class Stm32DetectError(Exception):
    """Base error for stm32detect."""


class DeviceTableError(Stm32DetectError):
    """Raised when the packaged device table is malformed."""


class SettingsError(Stm32DetectError):
    """Raised when the settings file cannot be read or does not validate."""


class TransportError(Stm32DetectError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised on TCP connect failures."""


class TransportSendError(TransportError):
    """Raised when writing a command fails."""


class TransportReceiveError(TransportError):
    """Raised when reading from the bridge fails for a reason other than a timeout."""


class TransportTimeoutError(TransportError):
    """Raised when the TCP connect times out."""
