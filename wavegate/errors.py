"""Exceptions raised by the gateway."""


class GatewayError(Exception):
    """Base class for gateway errors."""


class ConfigError(GatewayError):
    """The configuration file is missing, unreadable or invalid."""


class BindError(GatewayError):
    """The UDP listener could not bind its local address."""

    def __init__(self, address: str, cause: OSError) -> None:
        super().__init__(f"Failed to bind to address {address}: {cause}")
        self.address = address
        self.cause = cause
