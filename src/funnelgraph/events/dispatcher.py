"""Event dispatcher that fans out events to processors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from funnelgraph.events.processor import EventProcessor
    from funnelgraph.events.types import Event

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Manages a list of event processors and dispatches events to them.

    By default, dispatch is best-effort: a failing processor never breaks
    an edit. With ``strict=True``, exceptions propagate immediately.
    """

    def __init__(
        self,
        processors: list[EventProcessor] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self._processors: list[EventProcessor] = list(processors) if processors else []
        self._strict = strict

    @property
    def active(self) -> bool:
        """True if there is at least one registered processor."""
        return len(self._processors) > 0

    def add(self, processor: EventProcessor) -> None:
        """Register another processor. Events are delivered in registration order."""
        self._processors.append(processor)

    def remove(self, processor: EventProcessor) -> None:
        """Unregister a processor. Unknown processors are ignored."""
        if processor in self._processors:
            self._processors.remove(processor)

    def emit(self, event: Event) -> None:
        """Send *event* to every processor synchronously."""
        for processor in self._processors:
            try:
                processor.on_event(event)
            except Exception:
                if self._strict:
                    raise
                logger.warning(
                    "EventProcessor %s failed on %s at revision %d",
                    processor,
                    type(event).__name__,
                    event.revision,
                    exc_info=True,
                )

    def shutdown(self) -> None:
        """Shut down all processors.

        Every processor gets its shutdown call. In strict mode the first
        failure is re-raised once all of them have run.
        """
        first_error: Exception | None = None
        for processor in self._processors:
            try:
                processor.shutdown()
            except Exception as e:
                if not self._strict:
                    logger.warning("EventProcessor %s failed during shutdown", processor, exc_info=True)
                elif first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
