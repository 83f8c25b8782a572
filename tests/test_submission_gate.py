"""Tests for the shutdown drain of in-flight submissions"""

import asyncio

import pytest

from squid_registration.errors import ShuttingDownError
from squid_registration.main import lifespan
from squid_registration.services.submission_gate import SubmissionGate


def test_track_counts_in_flight():
    gate = SubmissionGate()

    with gate.track():
        assert gate.in_flight == 1
        with gate.track():
            assert gate.in_flight == 2

    assert gate.in_flight == 0


def test_track_releases_on_error():
    gate = SubmissionGate()

    with pytest.raises(RuntimeError):
        with gate.track():
            raise RuntimeError("store failed")

    assert gate.in_flight == 0


def test_closed_gate_refuses_new_submissions():
    gate = SubmissionGate()
    gate.close()

    assert gate.accepting is False
    with pytest.raises(ShuttingDownError):
        with gate.track():
            pass
    assert gate.in_flight == 0


@pytest.mark.asyncio
async def test_drain_when_idle():
    gate = SubmissionGate()
    gate.close()

    assert await gate.drain(timeout=0.1) is True


@pytest.mark.asyncio
async def test_drain_waits_for_running_submission():
    gate = SubmissionGate()
    finished = []

    async def submission():
        with gate.track():
            await asyncio.sleep(0.05)
            finished.append(True)

    task = asyncio.create_task(submission())
    await asyncio.sleep(0)
    gate.close()

    assert await gate.drain(timeout=1.0) is True
    assert finished == [True]
    await task


@pytest.mark.asyncio
async def test_drain_gives_up_after_timeout():
    gate = SubmissionGate()
    release = asyncio.Event()

    async def stuck_submission():
        with gate.track():
            await release.wait()

    task = asyncio.create_task(stuck_submission())
    await asyncio.sleep(0)
    gate.close()

    assert await gate.drain(timeout=0.05) is False
    assert gate.in_flight == 1

    release.set()
    await task
    assert gate.in_flight == 0


@pytest.mark.asyncio
async def test_shutdown_closes_webhook_client_once_drained(app_factory):
    app = app_factory()

    async with lifespan(app):
        pass

    assert app.state.submission_gate.accepting is False
    assert app.state.webhook_client.client.is_closed is True


@pytest.mark.asyncio
async def test_shutdown_keeps_webhook_client_for_running_submission(app_factory):
    app = app_factory(shutdown_grace_seconds=0.05)
    gate = app.state.submission_gate

    with gate.track():
        async with lifespan(app):
            pass

        assert gate.in_flight == 1
        assert app.state.webhook_client.client.is_closed is False

    await app.state.webhook_client.aclose()
