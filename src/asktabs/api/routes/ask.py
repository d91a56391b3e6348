"""Question answering and conversation endpoints."""

from fastapi import APIRouter

from asktabs.api.deps import AskServiceDep, ConversationLogDep
from asktabs.api.schemas import (
    AnswerResponse,
    AskRequest,
    MessageResponse,
    MessagesResponse,
)

router = APIRouter()


@router.post("/ask", response_model=AnswerResponse)
async def ask(body: AskRequest, ask_service: AskServiceDep) -> AnswerResponse:
    """Answer a question about the open tabs.

    Always succeeds: failures on the remote path degrade to local answers.
    """
    result = await ask_service.ask(body.question, mode=body.mode)
    return AnswerResponse.from_result(result)


@router.get("/messages", response_model=MessagesResponse)
async def list_messages(conversation: ConversationLogDep) -> MessagesResponse:
    """Conversation log, oldest first."""
    return MessagesResponse(
        messages=[MessageResponse.from_message(m) for m in conversation.messages]
    )


@router.delete("/messages", response_model=MessagesResponse)
async def clear_messages(conversation: ConversationLogDep) -> MessagesResponse:
    """Clear the conversation, leaving only the greeting."""
    messages = await conversation.clear()
    return MessagesResponse(messages=[MessageResponse.from_message(m) for m in messages])
