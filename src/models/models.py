"""API数据模型定义."""

from pydantic import BaseModel
from typing import Any, List, Optional


class ChatMessage(BaseModel):
    """单条聊天消息."""

    role: str
    content: str


class ChatPayload(BaseModel):
    """代理接收的聊天请求体.

    只要求messages存在，其余字段不做类型校验，原样交给上游判断。
    """

    messages: List[Any]
    model: Optional[Any] = None
    temperature: Optional[Any] = None
    top_p: Optional[Any] = None
    max_tokens: Optional[Any] = None
    stream: Optional[Any] = None
    nilrag: Optional[Any] = None


class ErrorResponse(BaseModel):
    """代理错误响应."""

    error: str
    details: str = ""


class TranslationRequest(BaseModel):
    """一次翻译请求."""

    source_language: str
    target_language: str
    source_text: str
    source_language_name: Optional[str] = None
    target_language_name: Optional[str] = None

    def chat_messages(self, system_prompt: str) -> List[ChatMessage]:
        return [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=self.source_text),
        ]


class Language(BaseModel):
    """语言项."""

    code: str
    name: str
