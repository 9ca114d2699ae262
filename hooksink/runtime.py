"""hooksink runtime entrypoint.

Builds a :class:`~hooksink.sink.HookSink` from environment variables
(see :class:`~hooksink.config.HookSinkConfig`), binds one handler to the
configured path, and serves the app with Granian.  The factory
``hooksink.runtime:create_app`` is the Granian target, so the same
configuration is read in every worker.

Without ``HOOKSINK_HANDLER`` the sink logs every push it receives.

Run the service directly with ``python -m hooksink.runtime``.
"""

from __future__ import annotations

import importlib
import typing as typ

from hooksink.config import HookSinkConfig
from hooksink.errors import HandlerRegistrationError, HookSinkConfigError
from hooksink.handlers import LoggingPushHandler
from hooksink.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from hooksink.sink import HookSink

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["build_sink", "create_app", "load_handler", "main"]

logger = get_logger(__name__)


def load_handler(spec: str | None) -> object:
    """Return the handler named by *spec*.

    *spec* has the form ``package.module:attribute``.  A class or other
    callable without a ``push`` attribute is called with no arguments and
    its result used; anything else is used as-is.  ``None`` yields a
    :class:`~hooksink.handlers.LoggingPushHandler`.

    Raises
    ------
    HookSinkConfigError
        If *spec* is malformed or does not name an importable attribute.

    """
    if spec is None:
        return LoggingPushHandler()

    module_name, sep, attribute = spec.partition(":")
    if not sep or not module_name or not attribute:
        raise HookSinkConfigError.invalid_handler(spec, "expected 'module:attribute'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise HookSinkConfigError.invalid_handler(spec, str(exc)) from exc

    target = getattr(module, attribute, None)
    if target is None:
        raise HookSinkConfigError.invalid_handler(spec, f"no attribute {attribute!r}")

    if isinstance(target, type) or (callable(target) and not hasattr(target, "push")):
        return target()
    return target


def build_sink(config: HookSinkConfig) -> HookSink:
    """Return a sink with the configured handler bound to ``config.path``.

    Raises
    ------
    HookSinkConfigError
        If the handler cannot be loaded.
    HandlerRegistrationError
        If the handler implements no recognised protocol.

    """
    if not config.verifies_signatures:
        log_warning(
            logger, "HOOKSINK_SECRET is empty; webhook signatures are not verified"
        )
    sink = HookSink(config.secret)
    sink.add(config.path, load_handler(config.handler))
    return sink


def create_app() -> falcon.asgi.App:
    """Create the ASGI application from environment configuration.

    Raises
    ------
    SystemExit
        If the configuration or the handler registration is invalid; the
        process must not serve a half-configured sink.

    """
    try:
        return build_sink(HookSinkConfig.from_env()).app
    except (HookSinkConfigError, HandlerRegistrationError) as exc:
        log_error(logger, "Refusing to start: %s", exc)
        raise SystemExit(1) from exc


def main() -> None:
    """Start the hooksink server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    try:
        config = HookSinkConfig.from_env()
    except HookSinkConfigError as exc:
        log_error(logger, "Invalid configuration: %s", exc)
        raise SystemExit(1) from exc

    normalized_level, invalid_level = configure_logging(config.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid HOOKSINK_LOG_LEVEL %r, falling back to %s",
            config.log_level,
            normalized_level,
        )

    # Fail before forking workers when the handler cannot be registered.
    try:
        build_sink(config)
    except (HookSinkConfigError, HandlerRegistrationError) as exc:
        log_error(logger, "Refusing to start: %s", exc)
        raise SystemExit(1) from exc

    log_info(
        logger,
        "Starting hooksink on %s:%d%s (log_level=%s)",
        config.host,
        config.port,
        config.path,
        normalized_level,
    )

    server = Granian(
        "hooksink.runtime:create_app",
        address=config.host,
        port=config.port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
