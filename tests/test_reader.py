import unittest
from datetime import datetime, timedelta, timezone

from monkmode.models import StudyMode
from monkmode.reader.sentences import Pacing, ReadingQueue, pause_after, split_sentences

TEXT = "Cells are the unit of life. Do they divide? Yes! "


class SentenceTests(unittest.TestCase):
    def test_split_keeps_terminators(self) -> None:
        self.assertEqual(split_sentences(TEXT), ["Cells are the unit of life.", "Do they divide?", "Yes!"])

    def test_split_edge_cases(self) -> None:
        self.assertEqual(split_sentences(""), [])
        self.assertEqual(split_sentences("   ...  "), [])
        self.assertEqual(split_sentences("No terminator"), ["No terminator"])
        self.assertEqual(split_sentences("Wait... what?"), ["Wait...", "what?"])

    def test_pause_is_clamped(self) -> None:
        self.assertAlmostEqual(pause_after("Hi."), 1.06)
        self.assertAlmostEqual(pause_after(" ".join(["word"] * 10)), 1.6)
        self.assertEqual(pause_after(" ".join(["word"] * 200)), 4.5)
        self.assertEqual(pause_after("a b", Pacing(base=0.0, per_word=0.1, min=0.5, max=1.0)), 0.5)


class ReadingQueueTests(unittest.TestCase):
    def setUp(self) -> None:
        self.now = datetime(2025, 9, 12, tzinfo=timezone.utc)
        self.queue = ReadingQueue(clock=lambda: self.now)
        self.queue.load(TEXT)

    def test_reads_every_sentence_in_order(self) -> None:
        seen = [self.queue.start()]
        while seen[-1] is not None:
            seen.append(self.queue.sentence_finished())
        self.assertEqual(seen, [0, 1, 2, None])
        self.assertFalse(self.queue.is_speaking)
        self.assertIsNone(self.queue.current_index)
        self.assertEqual(self.queue.last_highlighted, 2)

    def test_start_out_of_range(self) -> None:
        self.assertIsNone(self.queue.start(3))
        self.assertIsNone(self.queue.start(-1))

    def test_pause_resume_and_restart(self) -> None:
        self.queue.start(1)
        self.queue.pause()
        self.assertFalse(self.queue.is_speaking)
        self.assertIsNone(self.queue.sentence_finished())
        self.assertEqual(self.queue.resume(), 1)
        self.assertEqual(self.queue.restart_at_current(), 1)
        self.queue.stop()
        self.assertEqual(self.queue.restart_at_current(), 1)

    def test_reading_summary_once(self) -> None:
        self.queue.start_session("Bio", "Cells")
        idx = self.queue.start()
        while idx is not None:
            idx = self.queue.sentence_finished()
        self.now += timedelta(seconds=30)
        summary = self.queue.finish_session()
        self.assertEqual(summary.mode, StudyMode.READING)
        self.assertEqual(summary.duration_s, 30.0)
        self.assertEqual(summary.total, 3)
        self.assertTrue(summary.completed)
        self.assertIsNone(self.queue.finish_session())

    def test_stopped_reading_is_not_completed(self) -> None:
        self.queue.start_session()
        self.queue.start()
        self.queue.stop()
        self.assertFalse(self.queue.finish_session().completed)

    def test_second_session_stopped_early_is_not_completed(self) -> None:
        self.queue.start_session()
        idx = self.queue.start()
        while idx is not None:
            idx = self.queue.sentence_finished()
        self.assertTrue(self.queue.finish_session().completed)
        self.queue.start_session()
        self.queue.start(0)
        self.queue.stop()
        self.assertFalse(self.queue.finish_session().completed)

    def test_no_summary_without_session(self) -> None:
        self.assertIsNone(self.queue.finish_session())


if __name__ == "__main__":
    unittest.main()
