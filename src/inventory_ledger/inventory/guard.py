"""
Mutation guard for the inventory store.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from .errors import ReentrantCall

logger = logging.getLogger(__name__)


class MutationGuard:
    """
    Store-wide, non-reentrant lock around mutating operations.
    
    Acquisition never waits: if the guard is already held (by the same call
    chain or anyone else) the new operation fails with ReentrantCall.
    Callers that need queueing must serialize before reaching the store.
    """

    def __init__(self):
        self._lock = threading.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self, operation: str) -> Iterator[None]:
        """
        Hold the guard for the duration of the block.
        
        Args:
            operation: Name of the operation, used in the error message
            
        Raises:
            ReentrantCall: if the guard is already held
        """
        if not self._lock.acquire(blocking=False):
            logger.warning(f"Rejected re-entrant call to {operation}")
            raise ReentrantCall(operation)
        try:
            yield
        finally:
            self._lock.release()
