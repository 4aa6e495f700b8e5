"""Page planning and the closable queue handing page descriptors to workers."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from threading import Condition
from typing import Iterable, Iterator

from .cancel import CancelToken


@dataclass(frozen=True, slots=True)
class PageDescriptor:
    """One bounded slice of the dataset."""

    page_number: int
    offset: int
    limit: int

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")
        if self.offset < 0:
            raise ValueError("offset must be >= 0")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")


def count_pages(total_count: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be > 0")
    if total_count <= 0:
        return 0
    return (total_count + page_size - 1) // page_size


def plan_pages(total_count: int, page_size: int) -> Iterator[PageDescriptor]:
    """Yield descriptors for every page in ascending order."""

    for index in range(count_pages(total_count, page_size)):
        yield PageDescriptor(page_number=index + 1, offset=index * page_size, limit=page_size)


class TaskQueue:
    """FIFO of page descriptors; each item is handed to exactly one consumer.

    ``close`` stops further insertions but keeps whatever was already queued,
    so consumers draining the queue still see every enqueued descriptor.
    """

    def __init__(self) -> None:
        self._items: deque[PageDescriptor] = deque()
        self._closed = False
        self._cond = Condition()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def enqueue(self, descriptor: PageDescriptor) -> bool:
        with self._cond:
            if self._closed:
                return False
            self._items.append(descriptor)
            self._cond.notify()
            return True

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def get(self) -> PageDescriptor | None:
        """Block until an item is available; None once closed and empty."""

        with self._cond:
            while not self._items and not self._closed:
                self._cond.wait()
            if self._items:
                return self._items.popleft()
            return None

    def drain(self) -> Iterator[PageDescriptor]:
        while True:
            descriptor = self.get()
            if descriptor is None:
                return
            yield descriptor

    def populate(
        self, descriptors: Iterable[PageDescriptor], cancel_token: CancelToken | None = None
    ) -> int:
        """Enqueue descriptors until exhausted or cancelled, then close."""

        added = 0
        try:
            for descriptor in descriptors:
                if cancel_token is not None and cancel_token.cancelled:
                    break
                if not self.enqueue(descriptor):
                    break
                added += 1
        finally:
            self.close()
        return added


__all__ = ["PageDescriptor", "TaskQueue", "count_pages", "plan_pages"]
