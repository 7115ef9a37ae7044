import threading
import unittest

from truetime.protocol.cache import ResultCache, CachedTrueTime
from truetime.protocol.codec import zero_filler
from truetime.protocol.sntp import SntpClient
from truetime.protocol.validator import ValidationThresholds
from truetime.utils.exceptions import CacheNotInitializedError
from truetime.tests.fakes import FakeClock, FakeServer, WALL_MS


class TestResultCache(unittest.TestCase):
    def test_reconstruct_from_recorded_pair(self):
        cache = ResultCache()
        cache.record(true_time_ms=1000, monotonic_ms=500)
        self.assertEqual(cache.reconstruct(600), 1100)

    def test_uninitialized_cache_refuses_to_reconstruct(self):
        cache = ResultCache()
        self.assertFalse(cache.initialized)
        self.assertIsNone(cache.snapshot())
        with self.assertRaises(CacheNotInitializedError):
            cache.reconstruct(600)

    def test_synced_at_time_zero_is_still_initialized(self):
        cache = ResultCache()
        cache.record(0, 0)
        self.assertTrue(cache.initialized)
        self.assertEqual(cache.reconstruct(25), 25)

    def test_record_overwrites_whole_pair(self):
        cache = ResultCache()
        cache.record(1000, 500)
        cache.record(9000, 700)
        self.assertEqual(cache.snapshot(), CachedTrueTime(9000, 700))

    def test_clear_and_restore(self):
        cache = ResultCache()
        cache.record(1000, 500)
        cache.clear()
        self.assertFalse(cache.initialized)
        cache.restore(CachedTrueTime(2000, 100))
        self.assertEqual(cache.reconstruct(150), 2050)

    def test_readers_never_see_a_torn_pair(self):
        cache = ResultCache()
        cache.record(0, 0)
        stop = threading.Event()
        torn = []

        def writer():
            for i in range(20000):
                cache.record(i, i)
            stop.set()

        def reader():
            while not stop.is_set():
                snapshot = cache.snapshot()
                if snapshot.true_time_ms != snapshot.monotonic_ms:
                    torn.append(snapshot)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(torn, [])

    def test_reads_do_not_wait_for_exchange_in_flight(self):
        clock = FakeClock()
        server = FakeServer(clock)
        client = SntpClient(clock=clock, transport_factory=server, filler=zero_filler)
        client.cache.record(1000, 10)

        entered = threading.Event()
        release = threading.Event()
        original_reply_to = server.reply_to

        def parked_reply(request):
            entered.set()
            release.wait(5)
            return original_reply_to(request)

        server.reply_to = parked_reply
        worker = threading.Thread(
            target=client.request, args=("time.example.org", ValidationThresholds())
        )
        worker.start()
        try:
            self.assertTrue(entered.wait(5))
            self.assertEqual(client.cache.snapshot(), CachedTrueTime(1000, 10))
            self.assertEqual(client.cached_sntp_time(), 1000)
            self.assertTrue(client.was_initialized())
        finally:
            release.set()
            worker.join(5)

        self.assertEqual(client.cached_sntp_time(), WALL_MS + 50)


if __name__ == "__main__":
    unittest.main()
