"""翻译代理 API 路由."""

import json
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.exceptions import ProxyError, TransportError
from api.forwarder import ChatForwarder
from config.logging_config import get_logger
from models.models import ErrorResponse, Language
from translator.languages import LANGUAGES

logger = get_logger(__name__)

# 创建路由实例
router = APIRouter(prefix="/api")

_forwarder = ChatForwarder()


def get_forwarder() -> ChatForwarder:
    """返回共享的转发器实例，测试中可通过dependency_overrides替换."""
    return _forwarder


@router.post("/chat", responses={500: {"model": ErrorResponse}})
async def chat(request: Request, forwarder: ChatForwarder = Depends(get_forwarder)):
    """
    转发聊天补全请求.

    成功时原样返回上游JSON；失败时返回 {"error": ..., "details": ...}，
    状态码与上游一致，其余异常统一为500。
    """
    try:
        forwarder.ensure_configured()
        body = await request.json()
        logger.debug(
            f"Incoming request body: {json.dumps(body, ensure_ascii=False, indent=2)}"
        )
        data = await forwarder.forward(body)
        return JSONResponse(data)
    except ProxyError as e:
        return JSONResponse(e.to_dict(), status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Chat error: {e}")
        error = TransportError(details=str(e) or "Unknown error")
        return JSONResponse(error.to_dict(), status_code=error.status_code)


@router.get("/languages", response_model=List[Language])
async def list_languages():
    """返回支持的语言列表."""
    return LANGUAGES
