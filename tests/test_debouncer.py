"""Tests for the debouncer."""

import asyncio

import pytest

from estate_search.scheduling import Debouncer


@pytest.mark.asyncio
async def test_burst_collapses_to_last_action():
    debouncer = Debouncer(delay_ms=20)
    calls = []

    debouncer.schedule_deferred(lambda: calls.append('first'))
    debouncer.schedule_deferred(lambda: calls.append('second'))
    debouncer.schedule_deferred(lambda: calls.append('third'))

    assert calls == []
    await asyncio.sleep(0.08)

    assert calls == ['third']
    assert debouncer.pending is None


@pytest.mark.asyncio
async def test_run_immediately_cancels_pending():
    debouncer = Debouncer(delay_ms=20)
    calls = []

    debouncer.schedule_deferred(lambda: calls.append('deferred'))
    result = debouncer.run_immediately(lambda: calls.append('now') or 'done')
    await asyncio.sleep(0.08)

    assert result == 'done'
    assert calls == ['now']


@pytest.mark.asyncio
async def test_dispose_prevents_firing():
    debouncer = Debouncer(delay_ms=20)
    calls = []

    debouncer.schedule_deferred(lambda: calls.append('deferred'))
    debouncer.dispose()
    await asyncio.sleep(0.08)

    assert calls == []
    assert debouncer.disposed
    with pytest.raises(RuntimeError):
        debouncer.schedule_deferred(lambda: None)


@pytest.mark.asyncio
async def test_action_may_reschedule():
    debouncer = Debouncer(delay_ms=10)
    calls = []

    def action():
        calls.append(len(calls))
        if len(calls) < 2:
            debouncer.schedule_deferred(action)

    debouncer.schedule_deferred(action)
    await asyncio.sleep(0.1)

    assert calls == [0, 1]


@pytest.mark.asyncio
async def test_failing_action_is_logged(caplog):
    debouncer = Debouncer(delay_ms=5)

    def action():
        raise ValueError("boom")

    debouncer.schedule_deferred(action)
    await asyncio.sleep(0.05)

    assert "Deferred action failed" in caplog.text
