"""Chat API routes."""
from fastapi import APIRouter, HTTPException, Depends, Header

from storefront.api.dependencies import get_storefront_session, to_http_exception
from storefront.api.schemas import ChatMessage, ChatResponse
from storefront.analytics.logger import logger
from storefront.memory.session_manager import StorefrontSession, session_manager

router = APIRouter(prefix="/api/chat", tags=["chat"])

MAX_MESSAGE_LENGTH = 4000


@router.post("/", response_model=ChatResponse)
async def chat(
    message: ChatMessage,
    session: StorefrontSession = Depends(get_storefront_session),
):
    """Send a user message and return the assistant's reply."""
    text = message.message.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Message must not be empty")
    if len(text) > MAX_MESSAGE_LENGTH:
        logger.warning(f"Rejected chat message of {len(text)} characters")
        raise HTTPException(status_code=400, detail="Message is too long")

    try:
        await session.chat.initialize()
        await session.chat.add_user_message(text)
        transcript = session.chat.transcript()
        return ChatResponse(
            session_id=session.session_id,
            response=transcript[-1]["content"] if transcript[-1]["role"] == "assistant" else None,
            messages=transcript,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "processing chat message")


@router.get("/messages", response_model=ChatResponse)
async def get_messages(session: StorefrontSession = Depends(get_storefront_session)):
    """Get the transcript, seeding it with the greeting on first use."""
    try:
        await session.chat.initialize()
        return ChatResponse(session_id=session.session_id, messages=session.chat.transcript())
    except Exception as e:
        raise to_http_exception(e, "getting chat messages")


@router.delete("/session", status_code=204)
async def end_session(x_session_id: str = Header(...)):
    """End the caller's session, discarding its transcript and basket cache."""
    if not session_manager.end_session(x_session_id):
        raise HTTPException(status_code=404, detail="Session not found")
