import logging

from fastapi import APIRouter, Depends, Request

from vetnotes.errors import InvalidArgument
from vetnotes.models.api import (
    RelayReceiveRequest,
    RelayReceiveResponse,
    RelaySendRequest,
    RelaySendResponse,
)
from vetnotes.services.relay_store import RelayStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/relay", tags=["relay"])


def get_relay_store(request: Request) -> RelayStore:
    return request.app.state.relay_store


@router.post("/send", response_model=RelaySendResponse)
async def send(body: RelaySendRequest, store: RelayStore = Depends(get_relay_store)):
    """Park a payload under a relay id for another device to pick up."""
    store.send(body.relay_id, body.payload)
    logger.debug("Relay payload stored for %s", body.relay_id)
    return RelaySendResponse(relay_id=body.relay_id)


@router.post("/receive", response_model=RelayReceiveResponse)
async def receive(body: RelayReceiveRequest, store: RelayStore = Depends(get_relay_store)):
    """Take the payload for a relay id. Returns null when nothing is waiting."""
    if not body.relay_id:
        raise InvalidArgument("relayId", "is required")
    return RelayReceiveResponse(payload=store.receive(body.relay_id))
