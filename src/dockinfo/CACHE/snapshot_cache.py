# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Time-bounded cache of the container snapshot.
"""
import logging
import threading
import time
from typing import Callable, Optional

from .refresher import Refresher
from ..MODELS.settings import CACHE_DISABLED
from ..MODELS.snapshot import Snapshot

logger = logging.getLogger(__name__)


class SnapshotCache:
    """
    Holds the most recent snapshot and rebuilds it when stale.

    A snapshot is valid while caching is enabled and its age is at most
    ``timeout_ms``. Refreshes are serialized: callers that find the snapshot
    stale queue on a lock, and whoever gets in after a successful refresh
    reuses that result instead of calling the provider again. The snapshot
    reference is only ever replaced as a whole.
    """

    def __init__(self,
                 refresher: Refresher,
                 timeout_ms: int = CACHE_DISABLED,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initializes the cache.

        :param refresher: Builds new snapshots.
        :param timeout_ms: Freshness window in milliseconds, -1 disables caching.
        :param clock: Monotonic clock in seconds, must match the refresher's.
        """
        if timeout_ms < CACHE_DISABLED:
            raise ValueError(f"timeout_ms must be {CACHE_DISABLED} or >= 0")
        self.refresher = refresher
        self.timeout_ms = timeout_ms
        self.clock = clock
        self._snapshot: Optional[Snapshot] = None
        self._refresh_lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.timeout_ms != CACHE_DISABLED

    def is_valid(self, snapshot: Optional[Snapshot]) -> bool:
        """
        Checks whether ``snapshot`` may still be served.
        """
        if not self.enabled or snapshot is None:
            return False
        elapsed_ms = (self.clock() - snapshot.captured_at) * 1000
        return elapsed_ms <= self.timeout_ms

    def get(self) -> Snapshot:
        """
        Returns the current snapshot, refreshing it first if stale.

        :raises ProviderUnavailable: If a needed refresh fails. The held
            snapshot is left as it was.
        """
        snapshot = self._snapshot
        if self.is_valid(snapshot):
            return snapshot

        with self._refresh_lock:
            # another caller may have refreshed while we waited
            current = self._snapshot
            if current is not snapshot and self.is_valid(current):
                return current

            fresh = self.refresher.refresh()
            self._snapshot = fresh
            logger.debug(f"Cached {len(fresh)} containers captured at "
                         f"{fresh.captured_wall.isoformat()}")
            return fresh

    def peek(self) -> Optional[Snapshot]:
        """
        Returns the held snapshot without refreshing, possibly None.
        """
        return self._snapshot

    def invalidate(self) -> None:
        """
        Drops the held snapshot so the next get() refreshes.
        """
        logger.debug("Invalidating containers info cache")
        self._snapshot = None
