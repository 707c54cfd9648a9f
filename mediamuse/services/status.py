"""Per-tool request status tracking.

Every tool runs the same small state machine::

    IDLE -> LOADING -> SUCCESS | ERROR
    any  -> IDLE                       (reset: new input, cleared input)

Each ``begin`` hands out a generation token. ``reset`` bumps the generation,
so a response that arrives after the user moved on is dropped instead of
overwriting fresher state.
"""

import logging
from typing import Any, Callable, List, Optional

from ..errors import InvalidTransitionError
from ..models.status import RequestStatus

logger = logging.getLogger(__name__)

StatusListener = Callable[[str, RequestStatus], None]


class RequestTracker:
    """Status, result and error message for one tool."""

    def __init__(self, name: str):
        self.name = name
        self.status = RequestStatus.IDLE
        self.result: Optional[Any] = None
        self.error_message: Optional[str] = None
        self._generation = 0
        self._listeners: List[StatusListener] = []

    @property
    def is_loading(self) -> bool:
        return self.status is RequestStatus.LOADING

    def add_listener(self, listener: StatusListener) -> None:
        """Call ``listener(name, status)`` after every transition."""
        self._listeners.append(listener)

    def _transition(self, status: RequestStatus) -> None:
        logger.debug(f"{self.name}: {self.status.name} -> {status.name}")
        self.status = status
        for listener in self._listeners:
            listener(self.name, status)

    def begin(self) -> int:
        """Enter LOADING and return the token for this request."""
        if self.is_loading:
            raise InvalidTransitionError(f"{self.name}: request already in flight")
        self._generation += 1
        self.result = None
        self.error_message = None
        self._transition(RequestStatus.LOADING)
        return self._generation

    def _is_current(self, token: int) -> bool:
        if token != self._generation or not self.is_loading:
            logger.info(f"{self.name}: discarding stale response (token {token}, "
                        f"current {self._generation}, status {self.status.name})")
            return False
        return True

    def succeed(self, token: int, result: Any) -> bool:
        """LOADING -> SUCCESS. Returns False if the token is stale."""
        if not self._is_current(token):
            return False
        self.result = result
        self._transition(RequestStatus.SUCCESS)
        return True

    def fail(self, token: int, message: str) -> bool:
        """LOADING -> ERROR. Returns False if the token is stale."""
        if not self._is_current(token):
            return False
        self.error_message = message
        self._transition(RequestStatus.ERROR)
        return True

    def reset(self) -> None:
        """Back to IDLE, dropping the result and any in-flight response."""
        self._generation += 1
        self.result = None
        self.error_message = None
        if self.status is not RequestStatus.IDLE:
            self._transition(RequestStatus.IDLE)
