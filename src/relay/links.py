"""LinkTable: which messages across channels are copies of each other."""

from __future__ import annotations

import itertools
import logging
import threading
from collections import OrderedDict
from collections.abc import Iterable

from src.relay.models import LinkedMessage, LinkGroup

logger = logging.getLogger(__name__)

DEFAULT_MAX_GROUPS = 5000


class LinkTable:
    """In-memory map from a message to the LinkGroup it belongs to.

    Groups are stored once, under an integer ID, and every member message
    indexes that ID. Registration and eviction touch all members of a group
    inside one critical section, so readers see a whole group or none of it.

    Args:
        max_groups: Most groups kept. The least recently registered or looked
            up group is evicted first. ``0`` disables eviction.
    """

    def __init__(self, max_groups: int = DEFAULT_MAX_GROUPS) -> None:
        self._max_groups = max_groups
        self._groups: OrderedDict[int, LinkGroup] = OrderedDict()
        self._index: dict[LinkedMessage, int] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._groups)

    def __contains__(self, message: object) -> bool:
        with self._lock:
            return message in self._index

    def link_group(
        self,
        members: Iterable[LinkedMessage],
        *,
        author: str | None = None,
        bodies: Iterable[str] = (),
    ) -> LinkGroup | None:
        """Register the copies of one event. Returns the group, or None if fewer than two.

        ``author`` and ``bodies`` are kept so replies can quote a copy's own
        text; ``bodies`` pairs up with ``members`` when given.
        """
        group = LinkGroup(members=tuple(members), author=author, bodies=tuple(bodies))
        if len(group) < 2:
            return None
        with self._lock:
            group_id = next(self._ids)
            self._groups[group_id] = group
            for member in group.members:
                self._index[member] = group_id
            evicted = self._evict()
        logger.debug("Linked %d message(s) as group %d", len(group), group_id)
        if evicted:
            logger.debug("Evicted %d link group(s)", evicted)
        return group

    def lookup(self, message: LinkedMessage) -> LinkGroup | None:
        """Return the group containing ``message`` and mark it recently used."""
        with self._lock:
            group_id = self._index.get(message)
            if group_id is None:
                return None
            self._groups.move_to_end(group_id)
            return self._groups[group_id]

    def siblings(self, message: LinkedMessage) -> list[LinkedMessage]:
        """Linked copies of ``message`` in other channels (excludes itself)."""
        group = self.lookup(message)
        if group is None:
            return []
        return group.siblings(message)

    def clear(self) -> None:
        with self._lock:
            self._groups.clear()
            self._index.clear()

    def _evict(self) -> int:
        """Drop least-recently-used groups over the bound. Caller holds the lock."""
        if self._max_groups <= 0:
            return 0
        evicted = 0
        while len(self._groups) > self._max_groups:
            group_id, group = self._groups.popitem(last=False)
            for member in group.members:
                # A member re-linked later points at its newer group
                if self._index.get(member) == group_id:
                    del self._index[member]
            evicted += 1
        return evicted
