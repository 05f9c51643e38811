"""
Live session channel.

The client connects with its session token; the server pushes the merged
user state once on connect and again every time the user's identity record
or profile document changes. Both subscriptions are torn down on disconnect.
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from jobquest.core.auth_dependency import get_db
from jobquest.schemas.auth import UserState
from jobquest.services import identity_service
from jobquest.services.auth_context import AuthContext

logger = logging.getLogger(__name__)

router = APIRouter()


def _payload(user: Optional[UserState]) -> dict:
    return {"user": user.model_dump(by_alias=True, mode="json") if user else None}


@router.websocket("/ws/session")
async def session_socket(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    await websocket.accept()

    loop = asyncio.get_running_loop()
    updates: asyncio.Queue = asyncio.Queue()

    # Publishers run in worker threads; hand snapshots to the loop
    def on_change(user: Optional[UserState]):
        loop.call_soon_threadsafe(updates.put_nowait, user)

    ctx = AuthContext(db, on_change=on_change)
    receiver = None
    try:
        # Session lookup and the first profile read hit the database
        identity = await run_in_threadpool(identity_service.resolve_session, db, token)
        await run_in_threadpool(ctx.on_identity_changed, identity)
        logger.info(f"Session socket opened: uid={ctx.uid}")

        receiver = asyncio.ensure_future(websocket.receive_text())
        while True:
            getter = asyncio.ensure_future(updates.get())
            done, _ = await asyncio.wait({receiver, getter}, return_when=asyncio.FIRST_COMPLETED)

            if getter in done:
                await websocket.send_json(_payload(getter.result()))
            else:
                getter.cancel()

            if receiver in done:
                # Any client message is only a keep-alive; raises on disconnect
                receiver.result()
                receiver = asyncio.ensure_future(websocket.receive_text())

    except WebSocketDisconnect:
        logger.info(f"Session socket closed: uid={ctx.uid}")
    finally:
        if receiver is not None and not receiver.done():
            receiver.cancel()
        ctx.close()
