"""
Name-keyed maps and fan-out helpers.

A name-keyed map bridges two independently created resource sets: keys are
the names supplied in the submission, values the identifiers the platform
generated. Maps are owned by one submission run and passed by reference
into the concurrent tasks of that run.
"""

import asyncio
from typing import Any, Awaitable, Callable, Iterable, Optional


class NameKeyedMap:
    """
    Name -> id map with an atomic "reserve or join" creation primitive.

    ``get_or_create`` stores the pending creation before its first await,
    so concurrent callers asking for the same new name join the same
    creation instead of issuing a second one.
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Future] = {}
        self._resolved: dict[str, str] = {}

    async def get_or_create(
        self, name: str, factory: Callable[[], Awaitable[str]]
    ) -> str:
        if name in self._resolved:
            return self._resolved[name]

        pending = self._pending.get(name)
        if pending is None:
            pending = asyncio.ensure_future(factory())
            self._pending[name] = pending
            try:
                resource_id = await pending
            finally:
                del self._pending[name]
            self._resolved[name] = resource_id
            return resource_id

        # Shield so one cancelled waiter does not cancel the shared creation
        return await asyncio.shield(pending)

    def set(self, name: str, resource_id: str) -> None:
        self._resolved[name] = resource_id

    def get(self, name: str) -> Optional[str]:
        return self._resolved.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._resolved

    def __len__(self) -> int:
        return len(self._resolved)

    def to_dict(self) -> dict[str, str]:
        return dict(self._resolved)


class NameKeyedMultiMap:
    """Name -> list of ids, appended to as resources are created."""

    def __init__(self) -> None:
        self._items: dict[str, list[str]] = {}

    def add(self, name: str, resource_id: str) -> None:
        self._items.setdefault(name, []).append(resource_id)

    def add_all(self, names: Iterable[str], resource_id: str) -> None:
        for name in names:
            self.add(name, resource_id)

    def items(self):
        return self._items.items()

    def __len__(self) -> int:
        return len(self._items)

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(ids) for name, ids in self._items.items()}


async def join_all(awaitables: Iterable[Awaitable[Any]]) -> list[Any]:
    """
    Run awaitables concurrently and wait for every one to settle.

    Siblings are never cancelled. If any failed, the failure of the
    earliest awaitable (in input order) is raised once all have settled.

    Returns:
        Results in input order
    """
    results = await asyncio.gather(*awaitables, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results
