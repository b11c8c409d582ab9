"""Direct messaging between students and instructors."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.controllers.dependencies import CurrentSessionDep, StoreDep
from app.models import Message, MessageContact
from app.telemetry import record_created
from app.views import MarkReadResponse, MessageCreateRequest

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/contacts", response_model=list[MessageContact])
async def list_contacts(
    store: StoreDep,
    session: CurrentSessionDep,
) -> list[MessageContact]:
    """Everyone the caller has exchanged messages with, latest conversation first."""

    return store.get_message_contacts(session.user_id)


@router.patch("/read/{sender_id}", response_model=MarkReadResponse)
async def mark_as_read(
    sender_id: int,
    store: StoreDep,
    session: CurrentSessionDep,
) -> MarkReadResponse:
    updated = store.mark_messages_as_read(sender_id, session.user_id)
    return MarkReadResponse(message="Messages marked as read", updated=updated)


@router.get("/{contact_id}", response_model=list[Message])
async def get_conversation(
    contact_id: int,
    store: StoreDep,
    session: CurrentSessionDep,
) -> list[Message]:
    """Return the conversation with a contact, marking their messages as read."""

    if store.get_user(contact_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    store.mark_messages_as_read(contact_id, session.user_id)
    return store.get_messages_between_users(session.user_id, contact_id)


@router.post("", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreateRequest,
    store: StoreDep,
    session: CurrentSessionDep,
) -> Message:
    if store.get_user(payload.receiver_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Receiver not found",
        )

    message = store.create_message(
        sender_id=session.user_id,
        receiver_id=payload.receiver_id,
        content=payload.content,
    )
    record_created("message")
    return message
