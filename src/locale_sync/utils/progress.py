import sys
from typing import Callable, Optional, TextIO

ProgressCallback = Callable[[str, int, int, int], None]


class ConsoleProgress:
    """Progress observer that rewrites a single console line per document.

    Usage:
      progress = ConsoleProgress()
      strategy = SingleItemStrategy(translator, progress=progress)
      ... synchronize ...
      progress.finish(result)
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def __call__(self, path: str, processed: int, total: int, translated: int) -> None:
        self.stream.write(f"\r🔄 {path}: {processed}/{total} (Translated: {translated})")
        self.stream.flush()

    def finish(self, result) -> None:
        if result.has_failures:
            self.stream.write(
                f"\n⚠️ Failed to translate {result.failed} keys. "
                "You may want to run the command again or translate these manually.\n"
            )
            if result.failed <= 10:
                self.stream.write(f"Failed keys: {result.failed_keys}\n")
        self.stream.write(
            f"\r✅ {result.path}: {result.total}/{result.total} "
            f"(Translated: {result.translated}, Failed: {result.failed})\n"
        )
        self.stream.flush()
