# tests/test_store.py

"""Tests for the observable Reducer base class."""

import asyncio
import unittest

from shopfront.state.store import Reducer


class _Counter(Reducer[int, int]):
    """Adds each event to the state, yielding to the loop midway."""

    name = "test_counter"

    def __init__(self) -> None:
        super().__init__(0)
        self.trace: list[str] = []

    async def _reduce(self, state: int, event: int) -> int:
        self.trace.append(f"start {event}")
        await asyncio.sleep(0.01 if event == 1 else 0)
        self.trace.append(f"end {event}")
        return state + event


class TestReducer(unittest.IsolatedAsyncioTestCase):
    """Subscription and serialization behaviour."""

    async def test_dispatch_returns_and_stores_snapshot(self) -> None:
        counter = _Counter()
        self.assertEqual(await counter.dispatch(5), 5)
        self.assertEqual(counter.state, 5)

    async def test_unsubscribe_stops_notifications(self) -> None:
        counter = _Counter()
        seen: list[int] = []
        unsubscribe = counter.subscribe(seen.append)

        await counter.dispatch(1)
        unsubscribe()
        unsubscribe()
        await counter.dispatch(2)

        self.assertEqual(seen, [1])

    async def test_failing_listener_does_not_block_others(self) -> None:
        counter = _Counter()
        seen: list[int] = []

        def broken(_: int) -> None:
            raise RuntimeError("render failed")

        counter.subscribe(broken)
        counter.subscribe(seen.append)

        with self.assertLogs("shopfront.test_counter", level="ERROR"):
            await counter.dispatch(3)
        self.assertEqual(seen, [3])
        self.assertEqual(counter.state, 3)

    async def test_events_do_not_interleave(self) -> None:
        counter = _Counter()
        await asyncio.gather(counter.dispatch(1), counter.dispatch(2))
        self.assertEqual(
            counter.trace, ["start 1", "end 1", "start 2", "end 2"]
        )
        self.assertEqual(counter.state, 3)


if __name__ == "__main__":
    unittest.main()
