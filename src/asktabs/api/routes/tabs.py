"""Tab snapshot endpoints: refresh, read, refresh requests and live updates."""

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect

from asktabs.api.deps import (
    AggregatorDep,
    RefreshSchedulerDep,
    SnapshotStoreDep,
    get_refresh_scheduler,
    get_snapshot_store,
)
from asktabs.api.schemas import (
    ErrorResponse,
    SnapshotResponse,
    TabEventRequest,
    TabEventResponse,
)
from asktabs.core.errors import TabEnumerationError
from asktabs.core.models import Snapshot

logger = logging.getLogger(__name__)

# REST endpoints (mounted under /api/tabs)
router = APIRouter()
# WebSocket endpoint (mounted at root, not under /api)
ws_router = APIRouter()


@router.post(
    "/refresh",
    response_model=SnapshotResponse,
    responses={502: {"model": ErrorResponse}},
)
async def refresh_tabs(aggregator: AggregatorDep) -> SnapshotResponse:
    """Re-read every open tab and publish a new snapshot."""
    try:
        snapshot = await aggregator.refresh()
    except TabEnumerationError as e:
        raise HTTPException(status_code=502, detail=f"Cannot list tabs: {e}")
    return SnapshotResponse.from_snapshot(snapshot)


@router.get("", response_model=SnapshotResponse)
async def get_snapshot(store: SnapshotStoreDep) -> SnapshotResponse:
    """Last published snapshot. Never triggers a refresh."""
    return SnapshotResponse.from_snapshot(store.current)


@router.post("/events", response_model=TabEventResponse, status_code=202)
async def post_tab_event(
    body: TabEventRequest, scheduler: RefreshSchedulerDep
) -> TabEventResponse:
    """Queue a debounced refresh in response to a tab lifecycle event."""
    scheduler.request_refresh(reason=body.kind)
    return TabEventResponse(accepted=True)


async def _forward_updates(websocket: WebSocket, queue: asyncio.Queue) -> None:
    while True:
        snapshot = await queue.get()
        await websocket.send_json(_update_message(snapshot))


async def _stop_forwarder(task: asyncio.Task) -> None:
    """Cancel the forwarding task and collect its outcome."""
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.debug(f"Update forwarder stopped with error: {e}")


@ws_router.websocket("/ws/tabs")
async def websocket_tabs(
    websocket: WebSocket,
    store=Depends(get_snapshot_store),
    scheduler=Depends(get_refresh_scheduler),
) -> None:
    """WebSocket endpoint pushing snapshots.

    Protocol:
    - Server sends on connect and on every publish:
      {"type": "TAB_DATA_UPDATE", "data": <snapshot>}
    - Client may send: {"type": "REFRESH_TABS"} to request a refresh
    """
    await websocket.accept()
    queue = store.subscribe()
    scheduler.request_refresh(reason="subscriber")
    forwarder = None

    try:
        await websocket.send_json(_update_message(store.current))
        forwarder = asyncio.create_task(_forward_updates(websocket, queue))

        while True:
            message = await websocket.receive_text()
            try:
                request = json.loads(message)
            except json.JSONDecodeError:
                request = {}

            if isinstance(request, dict) and request.get("type") == "REFRESH_TABS":
                scheduler.request_refresh(reason="client")
            else:
                await websocket.send_json(
                    {"type": "error", "detail": "Unknown message type"}
                )
    except WebSocketDisconnect:
        logger.debug("Tab subscriber disconnected")
    finally:
        if forwarder is not None:
            await _stop_forwarder(forwarder)
        store.unsubscribe(queue)


def _update_message(snapshot: Snapshot) -> dict:
    return {
        "type": "TAB_DATA_UPDATE",
        "data": SnapshotResponse.from_snapshot(snapshot).model_dump(mode="json"),
    }
