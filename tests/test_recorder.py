"""
Unit tests for the request outcome recorder.

Every tracked request is counted once in `total_requests` and settles at most
one outcome; cancellation settles none.
"""
import asyncio
import os
import sys
from concurrent.futures import ThreadPoolExecutor

import pytest

current_dir = os.path.dirname(__file__)
project_root = os.path.abspath(os.path.join(current_dir, ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from metering import Metering  # noqa: E402
from metering.counters import TOTAL_REQUESTS, CounterRegistry  # noqa: E402
from metering.frequency import EndpointFrequencyTable  # noqa: E402
from metering.policies import (  # noqa: E402
    check_byte_count,
    check_redirect_depth,
    check_redirect_target,
    check_stream_lines,
)
from metering.recorder import RequestOutcomeRecorder  # noqa: E402


def counts(metering):
    return metering.counters.snapshot()


def test_normal_exit_is_success():
    metering = Metering()
    with metering.track("/get"):
        pass
    c = counts(metering)
    assert c["total_requests"] == 1
    assert c["successful_requests"] == 1
    assert c["failed_requests"] == 0
    assert metering.endpoints.snapshot() == {"/get": 1}


def test_exception_is_failure_and_propagates():
    metering = Metering()
    with pytest.raises(RuntimeError):
        with metering.track("/json"):
            raise RuntimeError("boom")
    c = counts(metering)
    assert c["total_requests"] == 1
    assert c["successful_requests"] == 0
    assert c["failed_requests"] == 1


def test_rejection_counts_block_and_failure():
    metering = Metering()
    with metering.track("/redirect/11") as outcome:
        outcome.reject(check_redirect_depth(11))
    c = counts(metering)
    assert c["redirects_blocked"] == 1
    assert c["failed_requests"] == 1
    assert c["successful_requests"] == 0
    assert c["total_requests"] == 1


def test_rejection_without_block_counter_is_plain_failure():
    metering = Metering()
    with metering.track("/stream/500") as outcome:
        outcome.reject(check_stream_lines(500))
    with metering.track("/redirect-to") as outcome:
        outcome.reject(check_redirect_target("http://x/" + "a" * 3000))
    c = counts(metering)
    assert c["failed_requests"] == 2
    assert all(c[name] == 0 for name in (
        "redirects_blocked", "delays_blocked", "bytes_blocked", "dangerous_urls_blocked"
    ))


def test_only_first_outcome_counts():
    metering = Metering()
    with pytest.raises(ValueError):
        with metering.track("/bytes/200000") as outcome:
            outcome.reject(check_byte_count(200_000))
            outcome.succeed()
            outcome.fail()
            raise ValueError("after settling")
    c = counts(metering)
    assert c["bytes_blocked"] == 1
    assert c["failed_requests"] == 1
    assert c["successful_requests"] == 0
    assert outcome.status == "rejected"


def test_explicit_failure_without_exception():
    metering = Metering()
    with metering.track("/status/500") as outcome:
        outcome.fail()
    assert counts(metering)["failed_requests"] == 1
    assert counts(metering)["successful_requests"] == 0


def test_cancellation_settles_no_outcome():
    metering = Metering()
    with pytest.raises(asyncio.CancelledError):
        with metering.track("/delay/5"):
            raise asyncio.CancelledError()
    c = counts(metering)
    assert c["total_requests"] == 1
    assert c["successful_requests"] == 0
    assert c["failed_requests"] == 0


def test_cancelled_sleeping_task_counts_total_only():
    metering = Metering()

    async def handler():
        with metering.track("/delay/5"):
            await asyncio.sleep(5)

    async def scenario():
        task = asyncio.create_task(handler())
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    c = counts(metering)
    assert c["total_requests"] == 1
    assert c["successful_requests"] + c["failed_requests"] == 0


def test_recording_faults_never_reach_the_caller():
    # A registry missing the outcome counters makes every settle call fail
    counters = CounterRegistry(names=(TOTAL_REQUESTS,))
    recorder = RequestOutcomeRecorder(counters, EndpointFrequencyTable())

    with recorder.track("/get") as outcome:
        outcome.succeed()
    with recorder.track("/redirect/99") as outcome:
        outcome.reject(check_redirect_depth(99))

    assert counters.snapshot() == {TOTAL_REQUESTS: 2}


def test_concurrent_tracking_keeps_totals_balanced():
    metering = Metering()

    def request(i):
        with metering.track(f"/status/{200 if i % 3 else 500}") as outcome:
            if i % 3 == 0:
                outcome.fail()

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(request, range(3000)))

    c = counts(metering)
    assert c["total_requests"] == 3000
    assert c["failed_requests"] == 1000
    assert c["successful_requests"] == 2000
    assert metering.endpoints.snapshot() == {"/status/200": 2000, "/status/500": 1000}
