"""Live subscription routes.

Each WebSocket streams full snapshots of one live query as JSON:

    {"version": 3, "items": [...], "error": null}

A snapshot is sent when the connection opens and again after every change
that concerns the signed-in user. Closing the socket ends the subscription.
"""

import asyncio
from typing import Any, Callable

import logfire
from dishka import AsyncContainer
from fastapi import APIRouter, Cookie, WebSocket, WebSocketDisconnect, status

from meet.application.usecase.invitation import InvitationInfo
from meet.application.usecase.meeting import MeetingInfo
from meet.domain.service import InvitationService, JWTService, MeetingService
from meet.domain.subscription import Snapshot, Subscription
from meet.domain.value import Identity

router = APIRouter(prefix="/live", tags=["live"])

Render = Callable[[Any], dict]


def _payload(snapshot: Snapshot, render: Render) -> dict:
    return {
        "version": snapshot.version,
        "items": [render(item) for item in snapshot.items],
        "error": str(snapshot.error) if snapshot.error else None,
    }


def keep_latest(queue: asyncio.Queue, snapshot: Snapshot) -> None:
    """Queue snapshot, replacing any snapshot not yet sent.

    Snapshots carry full state, so a slow client only needs the newest.
    """
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(snapshot)


async def _authenticate(
    websocket: WebSocket, container: AsyncContainer, auth_token: str | None
) -> Identity | None:
    jwt_service = await container.get(JWTService)
    identity = jwt_service.get_identity_from_token(auth_token)
    if identity is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
    return identity


async def _stream(
    websocket: WebSocket,
    subscribe: Callable[[Callable[[Snapshot], None]], Subscription],
    render: Render,
) -> None:
    """Forward snapshots to the socket until the client disconnects."""
    snapshots: asyncio.Queue[Snapshot] = asyncio.Queue(maxsize=1)
    subscription = subscribe(lambda snapshot: keep_latest(snapshots, snapshot))

    async def send() -> None:
        while True:
            snapshot = await snapshots.get()
            await websocket.send_json(_payload(snapshot, render))

    async def receive() -> None:
        # Clients don't send anything; this only waits for the disconnect
        while True:
            await websocket.receive_text()

    sender = asyncio.create_task(send())
    receiver = asyncio.create_task(receive())
    try:
        done, pending = await asyncio.wait(
            {sender, receiver}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
        for task in done:
            error = task.exception()
            if error is not None and not isinstance(error, WebSocketDisconnect):
                raise error
    finally:
        subscription.unsubscribe()
        sender.cancel()
        receiver.cancel()


@router.websocket("/invitations")
async def live_invitations(
    websocket: WebSocket, auth_token: str | None = Cookie(default=None)
) -> None:
    """Stream the current user's received invitations, newest first."""
    container: AsyncContainer = websocket.app.state.dishka_container
    async with container() as request_container:
        identity = await _authenticate(websocket, request_container, auth_token)
        if identity is None:
            return
        invitation_service = await request_container.get(InvitationService)

        await websocket.accept()
        logfire.info("Live invitations connected", user_id=identity.user_id)
        await _stream(
            websocket,
            lambda listener: invitation_service.subscribe(identity.user_id, listener),
            lambda invitation: InvitationInfo.from_invitation(invitation).model_dump(
                mode="json"
            ),
        )
        logfire.info("Live invitations disconnected", user_id=identity.user_id)


@router.websocket("/meetings")
async def live_meetings(
    websocket: WebSocket, auth_token: str | None = Cookie(default=None)
) -> None:
    """Stream the current user's meetings, earliest start first.

    Each meeting carries its upcoming/past classification at send time.
    """
    container: AsyncContainer = websocket.app.state.dishka_container
    async with container() as request_container:
        identity = await _authenticate(websocket, request_container, auth_token)
        if identity is None:
            return
        meeting_service = await request_container.get(MeetingService)

        await websocket.accept()
        logfire.info("Live meetings connected", user_id=identity.user_id)
        await _stream(
            websocket,
            lambda listener: meeting_service.subscribe(identity.user_id, listener),
            lambda meeting: MeetingInfo.from_meeting(meeting, identity.user_id).model_dump(
                mode="json"
            ),
        )
        logfire.info("Live meetings disconnected", user_id=identity.user_id)
