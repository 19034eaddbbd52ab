"""Playback for a display: slide rotation and spoken call announcements."""

import asyncio
import logging
from collections.abc import Callable

from signage.models.schemas.playlist import PlaylistRead, SlideRead
from signage.models.schemas.queue import DisplayQueueView

logger = logging.getLogger(__name__)


class DisplayPlayer:
    """Shows one slide at a time and moves on after the slide's duration.

    Each slide gets its own deadline on the running event loop. Changing the
    playlist or jumping to another slide cancels the pending deadline and
    schedules a fresh one, so a slide is never cut short by a stale timer.
    """

    def __init__(
        self,
        on_slide: Callable[[SlideRead | None], None] | None = None,
        seconds_per_unit: float = 1.0,
    ) -> None:
        self.on_slide = on_slide
        self.seconds_per_unit = seconds_per_unit
        self.playlist: PlaylistRead | None = None
        self.index = 0
        self._deadline: asyncio.TimerHandle | None = None

    @property
    def slides(self) -> list[SlideRead]:
        return self.playlist.slides if self.playlist is not None else []

    @property
    def current_slide(self) -> SlideRead | None:
        slides = self.slides
        if not slides:
            return None
        return slides[self.index]

    def load(self, playlist: PlaylistRead | None) -> None:
        self.playlist = playlist
        if self.index >= len(self.slides):
            self.index = 0
        self._schedule()

    def show(self, index: int) -> None:
        slides = self.slides
        self.index = index if 0 <= index < len(slides) else 0
        self._schedule()

    def advance(self) -> None:
        slides = self.slides
        self.index = (self.index + 1) % len(slides) if slides else 0
        self._schedule()

    def stop(self) -> None:
        if self._deadline is not None:
            self._deadline.cancel()
            self._deadline = None

    def _schedule(self) -> None:
        self.stop()
        slide = self.current_slide
        if self.on_slide is not None:
            self.on_slide(slide)
        if slide is None:
            return
        loop = asyncio.get_running_loop()
        self._deadline = loop.call_later(slide.duration * self.seconds_per_unit, self.advance)


class CallAnnouncer:
    """Plays the chime and speaks the call once per newly current ticket."""

    def __init__(
        self,
        speak: Callable[[str], None],
        chime: Callable[[], None] | None = None,
    ) -> None:
        self.speak = speak
        self.chime = chime
        self.last_ticket_id = None

    def observe(self, view: DisplayQueueView) -> bool:
        current = view.current
        if current is None or current.id == self.last_ticket_id:
            return False

        self.last_ticket_id = current.id
        if self.chime is not None:
            try:
                self.chime()
            except Exception:
                logger.warning("Chime playback failed", exc_info=True)
        self.speak(view.announcement or f"Ticket {current.number}.")
        return True
