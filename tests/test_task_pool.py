import asyncio
import unittest

from tvcatalog.utils.task_pool import run_all


class RunAllTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_failures_become_none_at_their_index(self) -> None:
        failing = set(range(0, 50, 5))
        in_flight = 0
        peak = 0

        async def worker(n: int) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            try:
                await asyncio.sleep(0.001 * (n % 4))
                if n in failing:
                    raise RuntimeError(f"item {n} failed")
                return n * 10 + 1
            finally:
                in_flight -= 1

        results = await run_all(range(50), worker, 5)

        self.assertEqual(len(results), 50)
        self.assertEqual(len(failing), 10)
        self.assertEqual([i for i, value in enumerate(results) if value is None], sorted(failing))
        self.assertEqual(sum(1 for value in results if value is not None), 40)
        for index, value in enumerate(results):
            if index not in failing:
                self.assertEqual(value, index * 10 + 1)
        self.assertLessEqual(peak, 5)
        self.assertGreater(peak, 1)

    async def test_results_follow_input_order_not_completion_order(self) -> None:
        async def worker(delay: float) -> float:
            await asyncio.sleep(delay)
            return delay

        delays = [0.02, 0.0, 0.01, 0.005, 0.0]
        results = await run_all(delays, worker, 3)

        self.assertEqual(results, delays)

    async def test_concurrency_ceiling_holds_with_one_slow_item(self) -> None:
        active = 0
        peak = 0

        async def worker(n: int) -> int:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.05 if n == 0 else 0.001)
            active -= 1
            return n

        results = await run_all(range(20), worker, 2)

        self.assertEqual(results, list(range(20)))
        self.assertEqual(peak, 2)

    async def test_empty_input(self) -> None:
        async def worker(n: int) -> int:
            return n

        self.assertEqual(await run_all([], worker, 5), [])

    async def test_invalid_concurrency(self) -> None:
        async def worker(n: int) -> int:
            return n

        with self.assertRaises(ValueError):
            await run_all([1], worker, 0)


if __name__ == "__main__":
    unittest.main()
