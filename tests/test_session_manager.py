import contextlib
import io
import threading
import time
import unittest

from monkmode.app import explain
from monkmode.app.events import EventBus
from monkmode.app.session_manager import SESSION_ENDED, SessionManager
from monkmode.config.config import validate_config
from monkmode.models import StudyItem, StudyMode
from monkmode.session.engine import Phase
from monkmode.session.ticker import SessionTimer, Ticker


def items(n: int) -> list[StudyItem]:
    return [StudyItem(question=f"q{i}", answer=f"a{i}", id=str(i)) for i in range(n)]


class SessionManagerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cfg = validate_config({"session": {"question_duration": 2, "answer_duration": 1}})
        self.manager = SessionManager(self.cfg, tick_interval_s=0.01)

    def tearDown(self) -> None:
        self.manager.stop()

    def test_summary_lands_in_history(self) -> None:
        self.manager.start_session(items(2), course="Bio", chapter="Cells")
        self.manager.mark_correct()
        self.manager.mark_incorrect()
        self.assertEqual(len(self.manager.history), 1)
        rec = self.manager.history.records()[0]
        self.assertEqual((rec.score, rec.missed, rec.total), (1, 1, 2))
        self.assertEqual(rec.course, "Bio")
        self.assertTrue(rec.completed)

    def test_overrides_and_mode(self) -> None:
        engine = self.manager.start_session(items(1), mode="quiz", overrides={"question_duration": 9})
        self.assertEqual(engine.mode, StudyMode.QUIZ)
        self.assertEqual(engine.config.question_duration, 9)
        self.assertEqual(engine.config.answer_duration, 1)

    def test_restart_stops_previous_session(self) -> None:
        self.manager.start_session(items(3))
        self.manager.mark_correct()
        self.manager.start_session(items(1))
        recs = self.manager.history.records()
        self.assertEqual(len(recs), 1)
        self.assertFalse(recs[0].completed)

    def test_restart_while_ticker_runs_leaves_new_session_untouched(self) -> None:
        self.manager.start_session(items(2))
        self.manager.run_ticker()
        # the old ticker wakes up while the lock is held and waits on it
        with self.manager._lock:
            time.sleep(0.1)
            engine = self.manager.start_session(items(3))
        time.sleep(0.1)
        self.assertEqual(engine.remaining, 2)
        self.assertEqual(engine.current_index, 0)
        self.assertEqual(engine.phase, Phase.AWAITING_REVEAL)
        done = threading.Event()
        self.manager.bus.subscribe(SESSION_ENDED, lambda _s: done.set())
        self.manager.run_ticker()
        self.assertTrue(done.wait(5.0))
        self.assertEqual(self.manager.history.summaries()[-1].total, 3)

    def test_stop_is_idempotent(self) -> None:
        self.manager.start_session(items(3))
        self.assertIsNotNone(self.manager.stop())
        self.assertIsNone(self.manager.stop())
        self.assertEqual(len(self.manager.history), 1)

    def test_snapshot(self) -> None:
        self.assertIsNone(self.manager.snapshot())
        self.manager.start_session(items(2))
        self.manager.tick()
        self.manager.tick()
        snap = self.manager.snapshot()
        self.assertEqual(snap.phase, Phase.REVEALED)
        self.assertEqual((snap.position, snap.total), (1, 2))
        self.assertEqual(snap.item.id, "0")

    def test_ticker_drives_session_to_completion(self) -> None:
        done = threading.Event()
        self.manager.bus.subscribe(SESSION_ENDED, lambda _s: done.set())
        self.manager.start_session(items(2))
        self.manager.run_ticker()
        self.assertTrue(done.wait(5.0))
        summary = self.manager.history.summaries()[0]
        # unjudged timeouts count as misses
        self.assertEqual((summary.score, summary.missed), (0, 2))

    def test_explain_traces_milestones(self) -> None:
        out = io.StringIO()
        explain.enable(True)
        try:
            with contextlib.redirect_stdout(out):
                self.manager.start_session(items(1))
                self.manager.mark_correct()
        finally:
            explain.enable(False)
        text = out.getvalue()
        self.assertIn("[EXPLAIN] session_started", text)
        self.assertIn("[EXPLAIN] session_ended", text)


class TickerTests(unittest.TestCase):
    def test_ticks_until_cancelled(self) -> None:
        hits = []
        enough = threading.Event()

        def cb() -> None:
            hits.append(1)
            if len(hits) >= 3:
                enough.set()

        t = Ticker(cb, interval_s=0.01)
        t.start()
        t.start()
        self.assertTrue(enough.wait(5.0))
        t.cancel()
        t.cancel()
        count = len(hits)
        self.assertFalse(t.running)
        self.assertEqual(len(hits), count)

    def test_rejects_bad_interval(self) -> None:
        with self.assertRaises(ValueError):
            Ticker(lambda: None, interval_s=0)


class SessionTimerTests(unittest.TestCase):
    def test_start_pause_reset(self) -> None:
        now = [100.0]
        timer = SessionTimer(clock=lambda: now[0])
        timer.start()
        now[0] = 105.0
        self.assertEqual(timer.elapsed, 5.0)
        timer.pause()
        now[0] = 200.0
        self.assertEqual(timer.elapsed, 5.0)
        self.assertFalse(timer.is_running)
        timer.start()
        now[0] = 202.0
        self.assertEqual(timer.elapsed, 7.0)
        timer.reset()
        self.assertEqual(timer.elapsed, 0.0)


class EventBusTests(unittest.TestCase):
    def test_failing_handler_does_not_block_others(self) -> None:
        bus = EventBus()
        got = []

        def boom(_payload) -> None:
            raise RuntimeError("boom")

        bus.subscribe("e", boom)
        bus.subscribe("e", got.append)
        with contextlib.redirect_stdout(io.StringIO()):
            delivered = bus.emit("e", 1)
        self.assertEqual(got, [1])
        self.assertEqual(delivered, 1)
        bus.unsubscribe("e", boom)
        self.assertEqual(bus.emit("e", 2), 1)


if __name__ == "__main__":
    unittest.main()
