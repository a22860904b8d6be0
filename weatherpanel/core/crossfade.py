from __future__ import annotations
from enum import Enum
from typing import Any, Callable, List, Optional

Loader = Callable[[str], Any]


class CrossfadeState(str, Enum):
    IDLE = "idle"
    PRELOADING = "preloading"
    COMMITTING = "committing"


class BackgroundCrossfade:
    """
    Holds the displayed background and at most one pending replacement.

    A new URL is preloaded straight away but only becomes current when the
    outgoing rows report that their exit animation finished, so the swap is
    never visible behind content that is still leaving. Later requests
    replace the pending URL; only the newest one is ever committed.
    Commit listeners run while the state is COMMITTING.
    """

    def __init__(self, current: str = "", loader: Optional[Loader] = None):
        self.loader = loader
        self.current = current or ""
        self.pending: Optional[str] = None
        self.current_image: Any = self._load(self.current)
        self.pending_image: Any = None
        self.state = CrossfadeState.IDLE
        self.history: List[str] = [self.current]
        self._listeners: List[Callable[[str], None]] = []

    def _load(self, url: Optional[str]) -> Any:
        if not url or self.loader is None:
            return None
        return self.loader(url)

    def on_commit(self, fn: Callable[[str], None]) -> None:
        self._listeners.append(fn)

    @property
    def is_pending(self) -> bool:
        return self.pending is not None

    def request(self, url: Optional[str]) -> bool:
        """Ask for `url` as the background. Returns True while a swap is waiting."""
        url = url or ""
        if url == self.current:
            # back to what is already shown: drop any pending swap
            self.pending = None
            self.pending_image = None
            self.state = CrossfadeState.IDLE
            return False
        if url != self.pending:
            self.pending = url
            self.pending_image = self._load(url)
        self.state = CrossfadeState.PRELOADING
        return True

    def on_exit_complete(self) -> Optional[str]:
        """Row content finished leaving; commit the pending background if any."""
        if self.pending is None:
            return None
        self.state = CrossfadeState.COMMITTING
        self.current = self.pending
        self.current_image = self.pending_image
        self.pending = None
        self.pending_image = None
        self.history.append(self.current)
        for fn in list(self._listeners):
            fn(self.current)
        self.state = CrossfadeState.IDLE
        return self.current

    def commit_if_no_content(self, has_content: bool) -> Optional[str]:
        """
        With no rows on screen no exit animation will run, so nothing would
        ever signal completion. Commit right away in that case.
        """
        if has_content:
            return None
        return self.on_exit_complete()
