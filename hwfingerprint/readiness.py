"""
hwfingerprint.readiness

Readiness waiter for the WMI service (Winmgmt)

Queries against a WMI service that is still starting fail at random, so
nothing is queried until the service reports "running".

Contract:
- at most `retries` status polls, `interval_s` apart (no sleep after the last)
- a status query error counts as "not running yet", never fatal by itself
- exhaustion -> ServiceUnavailableError (fatal for the whole fingerprint)
"""

from __future__ import annotations

import time
from typing import Callable, Protocol

from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from hwfingerprint.errors import ServiceUnavailableError
from hwfingerprint.logging import EventLog
from hwfingerprint.settings import SERVICE_RETRIES, SERVICE_RETRY_INTERVAL_S

RUNNING = "running"


class ServiceHandle(Protocol):
    def query_status(self) -> str: ...


class ServiceManager(Protocol):
    def connect(self) -> "ServiceManager": ...

    def open_service(self, name: str) -> ServiceHandle: ...


def open_instrumentation_service(manager: ServiceManager, name: str) -> ServiceHandle:
    """
    Connect to the service manager and open the named service

    Either step failing means WMI cannot be reached at all.
    """
    try:
        connected = manager.connect()
    except Exception as e:
        raise ServiceUnavailableError(f"failed to connect to service manager: {e}") from e

    try:
        return connected.open_service(name)
    except Exception as e:
        raise ServiceUnavailableError(f"failed to open service {name!r}: {e}") from e


def wait_for_service(
    service: ServiceHandle,
    *,
    retries: int = SERVICE_RETRIES,
    interval_s: float = SERVICE_RETRY_INTERVAL_S,
    sleep: Callable[[float], None] = time.sleep,
    log: EventLog | None = None,
) -> int:
    """
    Block until the service reports running

    Returns the attempt number that observed "running".
    """
    log = log if log is not None else EventLog()
    attempts = 0

    def _poll() -> str:
        nonlocal attempts
        attempts += 1
        return service.query_status()

    def _log_attempt(retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        if outcome is not None and outcome.failed:
            e = outcome.exception()
            log.emit(
                "wmi_wait_attempt",
                level="debug",
                attempt=retry_state.attempt_number,
                error_type=type(e).__name__,
                message=str(e),
            )
        else:
            log.emit(
                "wmi_wait_attempt",
                level="debug",
                attempt=retry_state.attempt_number,
                state=outcome.result() if outcome is not None else None,
            )

    retrying = Retrying(
        stop=stop_after_attempt(retries),
        wait=wait_fixed(interval_s),
        retry=retry_if_exception_type(Exception) | retry_if_result(lambda state: state != RUNNING),
        sleep=sleep,
        before_sleep=_log_attempt,
    )

    try:
        retrying(_poll)
    except RetryError as e:
        raise ServiceUnavailableError(
            f"WMI service did not reach {RUNNING!r} after {retries} attempts"
        ) from e

    log.emit("wmi_ready", level="debug", attempt=attempts)
    return attempts
