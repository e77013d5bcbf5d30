"""
Contract tests for the WMI readiness gate
"""

import json

import pytest

from fakes import FakeServiceHandle, FakeServiceManager
from hwfingerprint.errors import ServiceUnavailableError
from hwfingerprint.logging import EventLog
from hwfingerprint.readiness import open_instrumentation_service, wait_for_service


def test_ready_on_first_poll_does_not_sleep() -> None:
    """
    Running on the first poll returns immediately
    """
    sleeps: list[float] = []
    handle = FakeServiceHandle(["running"])

    assert wait_for_service(handle, sleep=sleeps.append) == 1
    assert handle.calls == 1
    assert sleeps == []


def test_query_errors_count_as_not_ready() -> None:
    """
    Status query errors are retried, not fatal
    """
    sleeps: list[float] = []
    handle = FakeServiceHandle([OSError("access denied"), "start_pending", "running"])

    assert wait_for_service(handle, sleep=sleeps.append) == 3
    assert sleeps == [15.0, 15.0]


def test_each_missed_poll_is_logged_before_sleeping(capsys) -> None:
    """
    wmi_wait_attempt carries the error or state of each missed poll
    """
    handle = FakeServiceHandle([OSError("access denied"), "start_pending", "running"])

    wait_for_service(handle, sleep=lambda _: None, log=EventLog("debug"))

    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    assert [e["event_type"] for e in events] == ["wmi_wait_attempt", "wmi_wait_attempt", "wmi_ready"]
    assert events[0]["attempt"] == 1
    assert events[0]["error_type"] == "OSError"
    assert events[1]["state"] == "start_pending"
    assert events[2]["attempt"] == 3


def test_retry_budget_follows_arguments() -> None:
    sleeps: list[float] = []
    handle = FakeServiceHandle([RuntimeError("rpc unavailable")])

    with pytest.raises(ServiceUnavailableError, match="after 2 attempts"):
        wait_for_service(handle, retries=2, interval_s=0.5, sleep=sleeps.append)

    assert handle.calls == 2
    assert sleeps == [0.5]


def test_timeout_after_five_polls_fifteen_seconds_apart() -> None:
    """
    Never running -> ServiceUnavailableError after 5 polls, 15s apart
    """
    sleeps: list[float] = []
    handle = FakeServiceHandle(["stopped"])

    with pytest.raises(ServiceUnavailableError, match="after 5 attempts"):
        wait_for_service(handle, sleep=sleeps.append)

    assert handle.calls == 5
    assert sleeps == [15.0] * 4
    assert sum(sleeps) == 60.0


def test_open_failures_are_service_unavailable() -> None:
    """
    Connect/open errors surface as ServiceUnavailableError
    """
    with pytest.raises(ServiceUnavailableError, match="connect"):
        open_instrumentation_service(FakeServiceManager(connect_error=OSError("denied")), "Winmgmt")

    with pytest.raises(ServiceUnavailableError, match="Winmgmt"):
        open_instrumentation_service(FakeServiceManager(open_error=OSError("missing")), "Winmgmt")


def test_open_uses_service_name() -> None:
    manager = FakeServiceManager()

    open_instrumentation_service(manager, "Winmgmt")

    assert manager.opened == ["Winmgmt"]
