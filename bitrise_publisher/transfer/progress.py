"""Progress reporting for publish and fetch.

One unit is one archive, not one file inside it. Reporters are
fire-and-forget: the orchestrator never reads anything back from them.
"""

from typing import Optional, Protocol

from tqdm import tqdm


class ProgressReporter(Protocol):
    def start(self, total: int) -> None: ...

    def increment(self, n: int = 1) -> None: ...

    def stop(self) -> None: ...


class NullProgress:
    """Reporter that discards every update."""

    def start(self, total: int) -> None:
        pass

    def increment(self, n: int = 1) -> None:
        pass

    def stop(self) -> None:
        pass


class TqdmProgress:
    """Single tqdm bar, recreated on each start()."""

    def __init__(self, desc: str = "artifacts", disable: Optional[bool] = None) -> None:
        self.desc = desc
        self.disable = disable
        self._bar: Optional[tqdm] = None

    def start(self, total: int) -> None:
        self.stop()
        self._bar = tqdm(total=total, desc=self.desc, unit="archive", disable=self.disable)

    def increment(self, n: int = 1) -> None:
        if self._bar is not None:
            self._bar.update(n)

    def stop(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
