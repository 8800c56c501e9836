"""
Progress - odbiorca postepu dlugich operacji

Trening, zapis i odczyt modelu zglaszaja start (postep nieokreslony),
okresowo wywoluja pump() zeby host mogl odswiezyc UI, a na koniec stop().
"""

from contextlib import contextmanager
from typing import Optional


class ProgressSink:
    """
    Bazowy odbiorca postepu (bez efektu - tryb headless)

    Host nadpisuje metody, np. zeby pokazac dialog lub spinner.
    """

    def start(self, label: str) -> None:
        pass

    def pump(self) -> None:
        pass

    def stop(self) -> None:
        pass


NullProgress = ProgressSink


@contextmanager
def progress_phase(progress: Optional[ProgressSink], label: str):
    """Start/stop postepu wokol bloku; stop() rowniez przy wyjatku"""
    sink = progress or NullProgress()
    sink.start(label)
    sink.pump()
    try:
        yield sink
    finally:
        sink.stop()
