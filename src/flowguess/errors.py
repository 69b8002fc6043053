"""Exception types raised by flowguess components."""

from __future__ import annotations


class FlowguessError(Exception):
    """Base class for all flowguess errors."""


class NetworkError(FlowguessError):
    """A page request to the block explorer failed.

    Raised for non-2xx responses, transport failures, timeouts and
    unparseable response bodies. The whole fetch is aborted; nothing from
    the failed attempt reaches the cache.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class MalformedEventError(FlowguessError):
    """A decoded log is missing a parameter its event signature requires."""

    def __init__(self, signature: str, parameter: str, detail: str = "") -> None:
        msg = f"{signature}: missing or invalid parameter '{parameter}'"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.signature = signature
        self.parameter = parameter


class ConfigError(FlowguessError):
    """Invalid configuration value."""
