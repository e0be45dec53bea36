from .sentences import Pacing, ReadingQueue, pause_after, split_sentences

__all__ = ["Pacing", "ReadingQueue", "pause_after", "split_sentences"]
