"""Interface to the realm SDK's sync API, as driven by the test controller."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar


@dataclass(frozen=True)
class AdminTokenCredentials:
    """Login credentials backed by the server's admin token."""

    token: str

    def __repr__(self) -> str:
        return "AdminTokenCredentials(token='***')"


@dataclass
class RealmConfig:
    """Options for opening a synced realm.

    Attributes:
        path: Local file the realm is stored in.
        user: Authenticated user returned by SyncBackend.login.
        url: realm:// URL of the remote instance.
        schema: Object schema; None opens the realm with the server's schema.
    """

    path: str
    user: Any
    url: str
    schema: list[Any] | None = None


class SyncSession(Protocol):
    def upload_all_local_changes(self) -> Awaitable[Any]: ...


class SyncedRealm(Protocol):
    sync_session: SyncSession

    def close(self) -> None: ...


class SyncBackend(Protocol):
    """The subset of the SDK the controller needs."""

    def login(self, server_url: str, credentials: AdminTokenCredentials) -> Any: ...

    def open(self, config: RealmConfig) -> Awaitable[SyncedRealm]: ...


R = TypeVar("R", bound=SyncedRealm)


async def wait_for_upload(realm: R, settle_delay: float) -> R:
    """Wait until the realm's local changes are uploaded, then settle.

    upload_all_local_changes() can resolve before the server has persisted
    the data (realm-sync#2580), so a short fixed delay follows it.
    """
    await realm.sync_session.upload_all_local_changes()
    await asyncio.sleep(settle_delay)
    return realm
