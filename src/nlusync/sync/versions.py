"""Remote version lifecycle for the single source-controlled model version."""

from __future__ import annotations

from loguru import logger

from nlusync.errors import AppNotFoundError, GatewayError
from nlusync.providers.luis_gateway import RemoteGateway
from nlusync.providers.models import AppInfo, RemoteVersionDescriptor
from nlusync.sync.results import Degradable


class RemoteVersionManager:
    """Look up, delete and describe the fixed remote model version.

    The local corpus is the source of truth, so the provider only ever holds one
    version, tagged with ``version_id``.
    """

    def __init__(self, gateway: RemoteGateway, version_id: str, app_id: str = "") -> None:
        self.gateway = gateway
        self.version_id = version_id
        self.app_id = app_id or gateway.app_id

    def get_remote_version(self) -> Degradable[RemoteVersionDescriptor | None]:
        """Return the remote descriptor for ``version_id``; lookup failures mean absent."""
        try:
            versions = self.gateway.list_versions()
        except GatewayError as e:
            logger.debug(f"Could not fetch app versions: {e.best_message}")
            return Degradable.fallback(None, f"version lookup failed: {e.best_message}")

        for version in versions:
            if version.version == self.version_id:
                return Degradable.success(version)
        return Degradable.success(None)

    def delete_version(self) -> Degradable[bool]:
        """Remove the remote version; a failure is reported, never raised."""
        try:
            self.gateway.delete_version(self.version_id)
        except GatewayError as e:
            logger.debug(f"Could not remove old version of the model: {e.best_message}")
            return Degradable.fallback(False, f"delete failed: {e.best_message}")

        logger.debug("Removed old version of the model")
        return Degradable.success(True)

    def get_app_info(self) -> AppInfo:
        """Fetch app metadata for the payload.

        Raises:
            AppNotFoundError: If the app cannot be fetched
        """
        try:
            return self.gateway.get_app_info()
        except GatewayError as e:
            raise AppNotFoundError(self.app_id, e.best_message) from e
