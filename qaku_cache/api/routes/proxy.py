"""Read-through proxy routes for the storage network."""

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel

from ...app import IApplication
from ...codec import is_content_id
from ...errors import StorageNetworkError
from ...logging_config import get_logger

logger = get_logger(__name__)


class InfoResponse(BaseModel):
    """Response model for node info."""

    peerId: str
    addr: str


def create_proxy_router(app: IApplication) -> APIRouter:
    """Create proxy router."""
    router = APIRouter(prefix="/api/qaku/v1", tags=["proxy"])

    @router.get("/info", response_model=InfoResponse)
    async def get_info() -> dict:
        """Peer id and first announced address of the Codex node."""
        try:
            info = await app.codex.node_info()
        except StorageNetworkError as e:
            logger.error("Failed to fetch node info: %s", e)
            raise HTTPException(status_code=502, detail=str(e))

        if not info.announce_addresses:
            raise HTTPException(status_code=502, detail="Codex node announces no address")

        return {"peerId": info.peer_id, "addr": info.announce_addresses[0]}

    @router.get("/snapshot/{cid}")
    async def get_snapshot(cid: str) -> Response:
        """Pass a dataset through from the storage network."""
        if not is_content_id(cid):
            raise HTTPException(status_code=400, detail="invalid CID")

        try:
            data = await app.codex.fetch_data(cid)
        except StorageNetworkError as e:
            logger.error("Failed to fetch snapshot %s: %s", cid, e)
            raise HTTPException(status_code=502, detail=str(e))

        return Response(
            content=data.content,
            status_code=data.status_code,
            media_type=data.content_type,
        )

    return router
