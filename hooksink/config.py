"""Environment configuration for the hooksink runtime.

Usage
-----
Defaults suit local experiments:

>>> config = HookSinkConfig()
>>> (config.path, config.port, config.verifies_signatures)
('/build', 8080, False)

Or load from environment variables:

>>> import os
>>> os.environ["HOOKSINK_SECRET"] = "ssshhhh!"
>>> HookSinkConfig.from_env().verifies_signatures
True

"""

from __future__ import annotations

import dataclasses as dc
import os

from hooksink.errors import HookSinkConfigError

__all__ = ["HookSinkConfig"]

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _read(name: str, default: str) -> str:
    raw = os.environ.get(name, "")
    return raw.strip() or default


@dc.dataclass(frozen=True, slots=True)
class HookSinkConfig:
    """Settings for a runtime serving a single webhook path.

    Attributes
    ----------
    secret
        Shared secret for ``X-Hub-Signature`` verification.  Empty
        disables verification.
    host
        Bind address.
    port
        Listen port.
    path
        Path the handler is bound to.
    handler
        Optional ``module:attribute`` import path of the handler object or
        zero-argument factory.  ``None`` selects the logging handler.
    log_level
        Raw log level string, normalized when logging is configured.

    """

    secret: str = ""
    host: str = "0.0.0.0"  # noqa: S104 - bind all interfaces for container
    port: int = 8080
    path: str = "/build"
    handler: str | None = None
    log_level: str = "INFO"

    @property
    def verifies_signatures(self) -> bool:
        """Return whether a secret is configured."""
        return bool(self.secret)

    @staticmethod
    def _parse_port(raw: str) -> int:
        try:
            port = int(raw)
        except ValueError as exc:
            raise HookSinkConfigError.invalid_port(raw) from exc
        if not (_MIN_PORT <= port <= _MAX_PORT):
            raise HookSinkConfigError.invalid_port(raw)
        return port

    @classmethod
    def from_env(cls) -> HookSinkConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``HOOKSINK_SECRET``: shared secret (kept verbatim, not stripped).
        - ``HOOKSINK_HOST``: bind address, default ``0.0.0.0``.
        - ``HOOKSINK_PORT``: listen port, default ``8080``.
        - ``HOOKSINK_PATH``: webhook path, default ``/build``.
        - ``HOOKSINK_HANDLER``: optional handler import path.
        - ``HOOKSINK_LOG_LEVEL``: log level, default ``INFO``.

        Raises
        ------
        HookSinkConfigError
            If the port is not an integer in 1-65535 or the path does not
            start with ``/``.

        """
        path = _read("HOOKSINK_PATH", "/build")
        if not path.startswith("/"):
            raise HookSinkConfigError.invalid_path(path)

        return cls(
            secret=os.environ.get("HOOKSINK_SECRET", ""),
            host=_read("HOOKSINK_HOST", "0.0.0.0"),  # noqa: S104 - bind all interfaces for container
            port=cls._parse_port(_read("HOOKSINK_PORT", "8080")),
            path=path,
            handler=_read("HOOKSINK_HANDLER", "") or None,
            log_level=_read("HOOKSINK_LOG_LEVEL", "INFO"),
        )
