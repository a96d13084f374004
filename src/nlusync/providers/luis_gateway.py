"""LUIS authoring API gateway.

Thin request/response boundary to the hosted provider. Every transport or HTTP
failure surfaces as :class:`GatewayError`; deciding which failures are fatal is
left to the sync engine.

Endpoints used (relative to ``LuisConfig.base_url``):
    - GET    /apps/{app}                           app metadata
    - GET    /apps/{app}/versions                  version list
    - DELETE /apps/{app}/versions/{version}/       remove a version
    - POST   /apps/{app}/versions/import           import a full version document
    - POST   /apps/{app}/versions/{version}/train  start training
    - GET    /apps/{app}/versions/{version}/train  per-submodel training status
    - POST   /apps/{app}/publish                   publish to staging or production
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

import httpx
from loguru import logger
from pydantic import ValidationError

from nlusync.errors import GatewayError
from nlusync.providers.models import (
    AppInfo,
    ModelPayload,
    RemoteVersionDescriptor,
    SubmodelStatus,
    TrainingStatus,
)
from nlusync.utils.config import LuisConfig
from nlusync.utils.http_client import create_http_client


class RemoteGateway(Protocol):
    app_id: str

    def list_versions(self) -> List[RemoteVersionDescriptor]: ...

    def delete_version(self, version_id: str) -> None: ...

    def get_app_info(self) -> AppInfo: ...

    def import_version(self, version_id: str, payload: ModelPayload) -> str: ...

    def start_training(self, version_id: str) -> TrainingStatus: ...

    def poll_training(self, version_id: str) -> List[SubmodelStatus]: ...

    def publish(self, version_id: str, *, is_staging: bool) -> Dict[str, Any]: ...


class LuisGateway:
    """Gateway to the LUIS v2.0 authoring API."""

    def __init__(self, config: LuisConfig, client: Optional[httpx.Client] = None) -> None:
        """Initialize the gateway.

        Args:
            config: LUIS configuration (app id, key, region, endpoint)
            client: Preconfigured httpx client (tests inject a mock transport here)
        """
        if not config.app_id:
            raise ValueError("LUIS app id is required")

        self.config = config
        self.app_id = config.app_id
        self.client = client or create_http_client(
            base_url=config.base_url,
            api_key=config.programmatic_key or None,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    @property
    def app_path(self) -> str:
        return f"/apps/{self.app_id}"

    def list_versions(self) -> List[RemoteVersionDescriptor]:
        data = _expect_list(self._request("GET", f"{self.app_path}/versions"), "version list")
        try:
            return [RemoteVersionDescriptor.model_validate(item) for item in data]
        except ValidationError as e:
            raise GatewayError(f"Malformed version list: {e}") from e

    def delete_version(self, version_id: str) -> None:
        self._request("DELETE", f"{self.app_path}/versions/{version_id}/")
        logger.debug(f"Deleted version {version_id} of app {self.app_id}")

    def get_app_info(self) -> AppInfo:
        data = self._request("GET", self.app_path)
        try:
            return AppInfo.model_validate(data)
        except ValidationError as e:
            raise GatewayError(f"Malformed app info: {e}") from e

    def import_version(self, version_id: str, payload: ModelPayload) -> str:
        """Import a version document; returns the provider's version id."""
        data = self._request(
            "POST",
            f"{self.app_path}/versions/import",
            params={"versionId": version_id},
            json=payload.to_request(),
        )
        return str(data) if data is not None else version_id

    def start_training(self, version_id: str) -> TrainingStatus:
        data = self._request("POST", f"{self.app_path}/versions/{version_id}/train", json={})
        if not isinstance(data, dict):
            raise GatewayError(f"Unexpected training start response: {data!r}")
        status = data.get("status")
        try:
            return TrainingStatus.parse(status)
        except ValueError as e:
            raise GatewayError(f"Unrecognized training status in response: {status!r}") from e

    def poll_training(self, version_id: str) -> List[SubmodelStatus]:
        data = _expect_list(
            self._request("GET", f"{self.app_path}/versions/{version_id}/train"),
            "training status",
        )
        if not all(isinstance(item, dict) for item in data):
            raise GatewayError(f"Malformed training status response: {data!r}")
        try:
            return [SubmodelStatus.from_response(item) for item in data]
        except ValueError as e:
            raise GatewayError(f"Unrecognized training status in response: {e}") from e

    def publish(self, version_id: str, *, is_staging: bool) -> Dict[str, Any]:
        data = self._request(
            "POST",
            f"{self.app_path}/publish",
            json={
                "versionId": version_id,
                "isStaging": is_staging,
                "region": self.config.region,
            },
        )
        return data if isinstance(data, dict) else {}

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "LuisGateway":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            raise GatewayError(
                f"{method} {path} failed with status {e.response.status_code}",
                status_code=e.response.status_code,
                detail=detail,
            ) from e
        except httpx.HTTPError as e:
            raise GatewayError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text


def _expect_list(data: Any, what: str) -> List[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise GatewayError(f"Expected a list for {what}, got: {data!r}")
    return data


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Extract ``error.message`` from a provider error body, if present."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if body.get("message"):
        return str(body["message"])
    return None
