from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ConversationResponse(BaseModel):
    user_id: int
    name: str
    email: str
    role: str
    last_message: str
    last_message_time: datetime
    unread_count: int

    model_config = {"from_attributes": True}


class ConversationListResponse(BaseModel):
    conversations: list[ConversationResponse]
    count: int
