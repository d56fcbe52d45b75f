"""Payloads HTTP (camelCase, compatíveis com o contrato original)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chat_ttl.domain.enums import MessageSender
from chat_ttl.domain.models import SessionRefresh


class _CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartChatRequest(_CamelSchema):
    user_id: str = Field(min_length=1)
    timeout_seconds: int | None = Field(default=None, gt=0)


class AppendMessageRequest(_CamelSchema):
    sender: MessageSender = Field(alias="from")
    content: str
    timeout_seconds: int | None = Field(default=None, gt=0)


class ActivityResponse(SessionRefresh):
    message: str


class EndChatResponse(_CamelSchema):
    user_id: str
    message: str
