"""Provision and tear down remote realms on the test server."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any

import httpx

from realm_testkit.config import ControllerConfig, load_admin_token
from realm_testkit.sync import (
    AdminTokenCredentials,
    RealmConfig,
    SyncBackend,
    SyncedRealm,
    wait_for_upload,
)


def admin_auth_header(admin_token: str) -> dict[str, str]:
    return {"Authorization": f'Realm-Access-Token version=1 token="{admin_token}"'}


async def delete_remote_realm(
    config: ControllerConfig,
    admin_token: str,
    realm_path: str,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> httpx.Response:
    """Issue DELETE /api/realm/<realm_path> against the server's REST API.

    Any HTTP response counts as success and is returned as-is; transport
    errors propagate.
    """
    url = f"http://{config.http_host}:{config.http_port}/api/realm/{realm_path}"
    logger = logger or logging.getLogger("realm_testkit.controller")
    logger.debug(f"DELETE {url}")
    async with httpx.AsyncClient(transport=transport) as client:
        response = await client.delete(url, headers=admin_auth_header(admin_token))
    logger.info(f"DELETE /api/realm/{realm_path} -> {response.status_code}")
    return response


class RemoteController:
    """Admin client for the sync test server.

    Construction reads the admin token and logs in; ``start()`` must be
    awaited before creating realms and ``shutdown()`` releases everything.
    """

    def __init__(
        self,
        backend: SyncBackend,
        config: ControllerConfig | None = None,
        *,
        logger: logging.Logger | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.backend = backend
        self.config = config or ControllerConfig()
        self.logger = logger or logging.getLogger("realm_testkit.controller")
        self.http_port = self.config.http_port
        self.path_prefix = self.config.path_prefix
        self._http_transport = http_transport

        self.admin_token = load_admin_token(self.config.admin_key_file)
        self.logger.debug(f"Loaded admin token from {self.config.admin_key_file}")
        self.admin_user = backend.login(
            self.config.auth_url, AdminTokenCredentials(self.admin_token)
        )
        self.logger.info(f"Logged in as admin at {self.config.auth_url}")

        self._temp = tempfile.TemporaryDirectory(prefix="realm-testkit-")
        self.admin_realm: SyncedRealm | None = None

    @property
    def temp_dir(self) -> Path:
        return Path(self._temp.name)

    async def start(self) -> None:
        """Open the administrative realm."""
        self.admin_realm = await self.backend.open(
            RealmConfig(
                path=str(self.temp_dir / "admin.realm"),
                user=self.admin_user,
                url=self.config.sync_url(self.config.admin_path),
            )
        )
        self.logger.info("Admin realm opened")

    async def shutdown(self) -> None:
        """Flush the admin realm, close it and remove the temp directory."""
        if self.admin_realm is None:
            raise RuntimeError("RemoteController.shutdown() called before start()")
        realm = await wait_for_upload(self.admin_realm, self.config.upload_settle_delay)
        realm.close()
        self._temp.cleanup()
        self.admin_realm = None
        self.logger.info("Admin realm closed, temp directory removed")

    async def create_realm(
        self, server_path: str, schema: list[Any] | None, local_path: str | Path
    ) -> SyncedRealm:
        """Open a synced realm under the path prefix and wait for its upload."""
        url = self.config.sync_url(self._prefixed(server_path))
        self.logger.debug(f"Creating realm {url} at {local_path}")
        realm = await self.backend.open(
            RealmConfig(
                path=str(local_path), user=self.admin_user, url=url, schema=schema
            )
        )
        return await wait_for_upload(realm, self.config.upload_settle_delay)

    async def delete_realm(self, server_path: str) -> httpx.Response:
        """Delete a remote realm; the response status is not inspected."""
        return await delete_remote_realm(
            self.config,
            self.admin_token,
            self._prefixed(server_path),
            transport=self._http_transport,
            logger=self.logger,
        )

    def set_realm_path_prefix(self, prefix: str) -> None:
        self.path_prefix = prefix

    def _prefixed(self, server_path: str) -> str:
        if not self.path_prefix:
            raise RuntimeError(
                "Realm path prefix is not set; call set_realm_path_prefix() "
                "or configure path_prefix first"
            )
        return f"{self.path_prefix}/{server_path}"
