"""Codex storage network client using httpx."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx

from ..codec import is_content_id
from ..errors import (
    ResolutionError,
    ResolutionErrorKind,
    StorageNetworkError,
    TriggerError,
)
from ..logging_config import get_logger
from ..models import DatasetManifest

logger = get_logger(__name__)

API_PREFIX = "/api/codex/v1"


@dataclass(frozen=True)
class NodeInfo:
    """Identity of the Codex node behind the cache."""

    peer_id: str
    announce_addresses: list[str]


@dataclass(frozen=True)
class DataResponse:
    """Raw dataset bytes as returned by the storage network."""

    status_code: int
    content: bytes
    content_type: str | None = None


class IManifestResolver(Protocol):
    """Size and metadata lookup for a dataset."""

    async def resolve_manifest(self, content_id: str) -> DatasetManifest:
        """Fetch the network manifest of content_id."""
        ...


class IReplicationTrigger(Protocol):
    """Start network replication of a dataset."""

    async def trigger_replication(self, content_id: str) -> None:
        """Ask the storage network to replicate content_id."""
        ...


class CodexClient:
    """Async client for the Codex REST API."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        # No timeout by default: replication acks can take a while.
        self._client = client or httpx.AsyncClient(timeout=None)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}{API_PREFIX}{path}"

    def _data_url(self, content_id: str, suffix: str = "") -> str:
        return self._url(f"/data/{quote(content_id, safe='')}{suffix}")

    async def resolve_manifest(self, content_id: str) -> DatasetManifest:
        """
        Fetch the network manifest of a dataset.

        Raises:
            ResolutionError: NOT_FOUND on 404, UNAVAILABLE on transport
                failure or other non-200 status, MALFORMED when the body is
                not a manifest.
        """
        if not is_content_id(content_id):
            raise ResolutionError(
                ResolutionErrorKind.MALFORMED, content_id, "invalid content id"
            )

        url = self._data_url(content_id, "/network/manifest")
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise ResolutionError(
                ResolutionErrorKind.UNAVAILABLE, content_id, str(e)
            ) from e

        if response.status_code == 404:
            raise ResolutionError(ResolutionErrorKind.NOT_FOUND, content_id)
        if response.status_code != 200:
            raise ResolutionError(
                ResolutionErrorKind.UNAVAILABLE,
                content_id,
                f"status {response.status_code}",
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ResolutionError(
                ResolutionErrorKind.MALFORMED, content_id, "body is not JSON"
            ) from e

        return _parse_manifest(content_id, body)

    async def trigger_replication(self, content_id: str) -> None:
        """
        Request network replication of a dataset.

        Returns once Codex acknowledges the request; replication itself
        continues inside the storage network.

        Raises:
            TriggerError: Transport failure or non-200 status.
        """
        if not is_content_id(content_id):
            raise TriggerError(content_id, detail="invalid content id")

        url = self._data_url(content_id, "/network")
        try:
            response = await self._client.post(url)
        except httpx.HTTPError as e:
            raise TriggerError(content_id, detail=str(e)) from e

        if response.status_code != 200:
            raise TriggerError(content_id, status_code=response.status_code)

    async def node_info(self) -> NodeInfo:
        """Fetch peer id and announced addresses of the Codex node."""
        try:
            response = await self._client.get(self._url("/debug/info"))
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise StorageNetworkError(f"failed to fetch node info: {e}") from e

        if not isinstance(body, dict) or not isinstance(body.get("id"), str):
            raise StorageNetworkError("node info has no id")

        addresses = body.get("announceAddresses") or []
        return NodeInfo(
            peer_id=body["id"],
            announce_addresses=[a for a in addresses if isinstance(a, str)],
        )

    async def fetch_data(self, content_id: str) -> DataResponse:
        """Download a dataset, passing the upstream status through."""
        if not is_content_id(content_id):
            raise StorageNetworkError(f"invalid content id: {content_id!r}")

        try:
            response = await self._client.get(self._data_url(content_id))
        except httpx.HTTPError as e:
            raise StorageNetworkError(f"failed to fetch {content_id}: {e}") from e

        return DataResponse(
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("content-type"),
        )

    async def aclose(self) -> None:
        await self._client.aclose()


def _parse_manifest(content_id: str, body: object) -> DatasetManifest:
    """Interpret a `{cid, manifest: {...}}` document.

    Absent optional fields take their zero value; present fields of the
    wrong type make the whole manifest MALFORMED.
    """
    if not isinstance(body, dict) or not isinstance(body.get("manifest"), dict):
        raise ResolutionError(
            ResolutionErrorKind.MALFORMED, content_id, "no manifest object"
        )

    def malformed(field: str, value: object) -> ResolutionError:
        return ResolutionError(
            ResolutionErrorKind.MALFORMED, content_id, f"bad {field} {value!r}"
        )

    def typed(source: dict, field: str, kind: type, default):
        value = source.get(field)
        if value is None:
            return default
        # bool is an int subclass
        if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
            raise malformed(field, value)
        return value

    manifest = body["manifest"]
    if manifest.get("datasetSize") is None:
        raise malformed("datasetSize", None)
    size = typed(manifest, "datasetSize", int, 0)
    if size < 0:
        raise malformed("datasetSize", size)

    return DatasetManifest(
        content_id=typed(body, "cid", str, "") or content_id,
        dataset_size_bytes=size,
        block_size_bytes=typed(manifest, "blockSize", int, 0),
        is_protected=typed(manifest, "protected", bool, False),
        merkle_tree_id=typed(manifest, "treeCid", str, ""),
        uploaded_at=typed(manifest, "uploadedAt", str, ""),
    )
