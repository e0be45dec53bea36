from __future__ import annotations

"""Terminal front-end for MonkMode using SessionManager and the reading queue."""

import argparse
import sys
import threading
import time
from pathlib import Path
from typing import List, Optional

from .. import __version__
from ..config.config import load_config, validate_config
from ..content.deck import ContentError, Deck, load_seed
from ..models import StudyMode
from ..reader.sentences import Pacing, ReadingQueue
from ..session.engine import Phase
from ..stats.stats import format_summary
from ..util.randomness import seed_if_needed
from . import explain
from .session_manager import TICKED, SessionManager, Snapshot


class _Renderer:
    """Prints question/answer transitions once, whichever thread sees them first."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last: Optional[tuple] = None

    def __call__(self, snap: Optional[Snapshot]) -> None:
        if snap is None:
            return
        key = (snap.position, snap.phase, snap.finished, snap.stopped)
        with self._lock:
            if key == self._last:
                return
            self._last = key
            if snap.finished:
                print("\nAll done. Press Enter to see your summary.")
                return
            if snap.stopped or snap.item is None:
                return
            if snap.phase == Phase.AWAITING_REVEAL:
                print(f"\n[{snap.position}/{snap.total}] Q: {snap.item.question}")
                for i, choice in enumerate(snap.item.choices, start=1):
                    print(f"    {i}. {choice}")
            else:
                print(f"    A: {snap.item.answer}   (y = got it, n = missed)")


def _load_deck(path: str) -> Deck:
    try:
        return load_seed(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        print(f"ERROR: Deck file not found: {path}", file=sys.stderr)
        sys.exit(1)
    except ContentError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


def _cmd_list(args: argparse.Namespace) -> int:
    deck = _load_deck(args.deck)
    for course in deck.courses():
        print(course or "(no course)")
        for chapter in deck.chapters_for(course):
            print(f"  {chapter or '(no chapter)'}: {len(deck.items_for(course, chapter))} cards")
        for ch in deck.reader_chapters:
            if ch.course == course:
                print(f"  [reader] {ch.chapter}: {len(ch.paragraphs)} paragraphs")
    return 0


def _cmd_run(args: argparse.Namespace, cfg: dict) -> int:
    deck = _load_deck(args.deck)
    items = deck.items_for(args.course, args.chapter)
    if not items:
        print("No items for this course/chapter.")
        return 0

    mode = args.mode or cfg["session"]["mode"]
    if mode == StudyMode.READING.value:
        print("WARNING: 'reading' is not a flashcard mode; use the read command. Using 'treadmill'.")
        mode = StudyMode.TREADMILL.value

    manager = SessionManager(cfg)
    render = _Renderer()
    manager.bus.subscribe(TICKED, render)
    manager.start_session(
        items,
        mode=mode,
        course=args.course,
        chapter=args.chapter,
        overrides={
            "question_duration": args.question_seconds,
            "answer_duration": args.answer_seconds,
            "shuffle": True if args.shuffle else None,
        },
        seed=seed_if_needed(),
    )
    timed = manager.engine is not None and manager.engine.mode != StudyMode.FREE
    render(manager.snapshot())
    if timed:
        manager.run_ticker()
    print("(Enter = show answer, y = correct, n = missed, q = quit)")

    try:
        while True:
            snap = manager.snapshot()
            if snap is None or snap.finished or snap.stopped:
                break
            cmd = input().strip().lower()
            if cmd == "q":
                manager.stop()
                break
            if cmd == "y":
                manager.mark_correct()
            elif cmd == "n":
                manager.mark_incorrect()
            else:
                manager.reveal()
            render(manager.snapshot())
    except (KeyboardInterrupt, EOFError):
        manager.stop()

    summaries = manager.history.summaries()
    if summaries:
        print("\nSession Summary:")
        print(format_summary(summaries[-1]))
    return 0


def _cmd_read(args: argparse.Namespace, cfg: dict) -> int:
    deck = _load_deck(args.deck)
    chapter = deck.reader_chapter(args.course, args.chapter)
    if chapter is None:
        print(f"No reader chapter '{args.chapter}' in course '{args.course}'.")
        return 1
    queue = ReadingQueue(Pacing.from_config(cfg.get("reader", {})))
    queue.load(chapter.text)
    queue.start_session(chapter.course, chapter.chapter)
    idx = queue.start()
    try:
        while idx is not None:
            print(f"[{idx + 1}/{len(queue.sentences)}] {queue.sentences[idx]}")
            if not args.no_pause:
                time.sleep(queue.current_pause())
            idx = queue.sentence_finished()
    except KeyboardInterrupt:
        queue.stop()
    summary = queue.finish_session()
    if summary is not None:
        print("\nSession Summary:")
        print(format_summary(summary))
    return 0


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="monkmode")
    p.add_argument("--version", action="version", version=f"monkmode {__version__}")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--explain", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    lp = sub.add_parser("list", help="List courses and chapters in a deck")
    lp.add_argument("--deck", required=True)

    rp = sub.add_parser("run", help="Run a study session")
    rp.add_argument("--deck", required=True)
    rp.add_argument("--course", default=None)
    rp.add_argument("--chapter", default=None)
    rp.add_argument("--mode", default=None, choices=[m.value for m in StudyMode if m != StudyMode.READING])
    rp.add_argument("--question-seconds", dest="question_seconds", type=int, default=None)
    rp.add_argument("--answer-seconds", dest="answer_seconds", type=int, default=None)
    rp.add_argument("--shuffle", action="store_true")

    dp = sub.add_parser("read", help="Read a chapter sentence by sentence")
    dp.add_argument("--deck", required=True)
    dp.add_argument("--course", required=True)
    dp.add_argument("--chapter", required=True)
    dp.add_argument("--no-pause", dest="no_pause", action="store_true")

    args = p.parse_args(argv)
    cfg = validate_config(load_config(args.config))
    explain.enable(args.explain or cfg["ui"]["explain"])

    if args.cmd == "list":
        return _cmd_list(args)
    if args.cmd == "run":
        for name in ("question_seconds", "answer_seconds"):
            value = getattr(args, name)
            if value is not None and value < 1:
                p.error(f"--{name.replace('_', '-')} must be >= 1")
        return _cmd_run(args, cfg)
    if args.cmd == "read":
        return _cmd_read(args, cfg)
    return 2


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
