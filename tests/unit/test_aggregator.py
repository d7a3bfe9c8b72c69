import asyncio

import pytest

from dirtally.services.aggregator import Aggregator, AggregatorState
from dirtally.services.cancellation import CancellationSignal
from dirtally.services.stream import SizeEventStream


def _setup():
    stream = SizeEventStream()
    cancel = CancellationSignal()
    cancel.bind(asyncio.get_running_loop())
    return stream, cancel


def test_completion_emits_final_totals():
    finals = []

    async def run():
        stream, cancel = _setup()
        agg = Aggregator(stream, cancel, on_totals=finals.append)
        consumer = asyncio.create_task(agg.run())
        for size in (10, 20, 30):
            await stream.send(size)
        await stream.close()
        return agg, await asyncio.wait_for(consumer, timeout=1)

    agg, outcome = asyncio.run(run())
    assert agg.state is AggregatorState.COMPLETED
    assert not outcome.cancelled
    assert (outcome.totals.files, outcome.totals.bytes) == (3, 60)
    assert finals == [outcome.totals]


def test_cancellation_drains_every_in_flight_event():
    finals = []

    async def run():
        stream, cancel = _setup()
        agg = Aggregator(stream, cancel, on_totals=finals.append)
        consumer = asyncio.create_task(agg.run())

        async def producer(cancel_at=None):
            # Producers that never look at the signal must still finish.
            for i in range(100):
                await stream.send(1)
                if i == cancel_at:
                    cancel.cancel()

        await asyncio.wait_for(
            asyncio.gather(producer(cancel_at=9), producer(), producer()), timeout=5
        )
        await stream.close()
        return agg, await asyncio.wait_for(consumer, timeout=1)

    agg, outcome = asyncio.run(run())
    assert agg.state is AggregatorState.CANCELLED
    assert outcome.cancelled
    assert outcome.totals.files + outcome.discarded == 300
    assert outcome.totals.files < 300
    # Reference behaviour: nothing printed on cancel.
    assert finals == []


def test_report_partial_emits_totals_on_cancel():
    finals = []

    async def run():
        stream, cancel = _setup()
        agg = Aggregator(stream, cancel, on_totals=finals.append, report_partial=True)
        consumer = asyncio.create_task(agg.run())
        await stream.send(5)
        await stream.send(5)
        cancel.cancel()
        await stream.close()
        return await asyncio.wait_for(consumer, timeout=1)

    outcome = asyncio.run(run())
    assert outcome.cancelled
    assert finals == [outcome.totals]


def test_ticks_report_running_totals():
    progress = []

    async def run():
        stream, cancel = _setup()
        agg = Aggregator(
            stream, cancel, tick_interval=0.01, on_progress=progress.append
        )
        consumer = asyncio.create_task(agg.run())
        for _ in range(5):
            await stream.send(100)
            await asyncio.sleep(0.03)
        await stream.close()
        return await asyncio.wait_for(consumer, timeout=1)

    outcome = asyncio.run(run())
    assert progress, "expected at least one progress tick"
    files = [p.files for p in progress]
    assert files == sorted(files)
    assert all(p.files <= outcome.totals.files for p in progress)
    assert all(p.bytes == p.files * 100 for p in progress)


def test_no_ticks_without_progress_callback():
    async def run():
        stream, cancel = _setup()
        agg = Aggregator(stream, cancel, tick_interval=0.001)
        consumer = asyncio.create_task(agg.run())
        await stream.send(1)
        await asyncio.sleep(0.01)
        await stream.close()
        return await asyncio.wait_for(consumer, timeout=1)

    assert asyncio.run(run()).totals.files == 1


def test_run_twice_is_rejected():
    async def run():
        stream, cancel = _setup()
        agg = Aggregator(stream, cancel)
        consumer = asyncio.create_task(agg.run())
        await stream.close()
        await consumer
        await agg.run()

    with pytest.raises(RuntimeError):
        asyncio.run(run())
