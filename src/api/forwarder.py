"""上游聊天补全服务转发器."""

from typing import Any, Dict, Optional

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI
from pydantic import ValidationError

from api.exceptions import ConfigurationError, TransportError, UpstreamError
from config.logging_config import get_logger
from config.settings import ChatDefaults, Settings, settings
from models.models import ChatPayload

logger = get_logger(__name__)

MISSING_CONFIG_DETAILS = "Missing environment variables: NILAI_API_URL or NILAI_API_KEY"


class ChatForwarder:
    """校验配置、补全默认参数并把请求转发给上游服务."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        defaults: Optional[ChatDefaults] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        初始化转发器.
        :param config: 配置对象，默认使用全局配置
        :param defaults: 请求默认参数
        :param http_client: 自定义httpx客户端，测试时可注入MockTransport
        """
        self.settings = config or settings
        self.defaults = defaults or ChatDefaults.from_settings(self.settings)
        self.http_client = http_client
        self._client: Optional[AsyncOpenAI] = None

    def ensure_configured(self) -> None:
        """上游地址或密钥缺失时立即失败，不发起任何网络请求."""
        if not self.settings.is_upstream_configured:
            logger.error(MISSING_CONFIG_DETAILS)
            raise ConfigurationError(details=MISSING_CONFIG_DETAILS)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            base_url = self.settings.nilai_api_url.rstrip("/")
            self._client = AsyncOpenAI(
                api_key=self.settings.nilai_api_key,
                base_url=f"{base_url}/v1",
                timeout=self.settings.request_timeout,
                max_retries=0,
                http_client=self.http_client or httpx.AsyncClient(),
            )
        return self._client

    def build_upstream_body(self, body: Any) -> Dict[str, Any]:
        """校验请求体并应用默认参数."""
        try:
            payload = ChatPayload.model_validate(body)
        except ValidationError as e:
            raise TransportError(details=str(e)) from e
        return self.defaults.apply(payload.model_dump())

    async def forward(self, body: Any) -> Dict[str, Any]:
        """
        转发一次聊天请求.

        以流式响应方式发出请求，响应体由本方法读取，退出时连接总会被关闭。

        Args:
            body: 客户端提交的JSON请求体

        Returns:
            上游返回的JSON，原样透传

        Raises:
            ConfigurationError: 未配置上游地址或密钥
            UpstreamError: 上游返回非2xx状态码
            TransportError: 网络异常或响应无法解析
        """
        self.ensure_configured()
        upstream_body = self.build_upstream_body(body)
        nilrag = upstream_body.pop("nilrag")
        client = self._get_client()

        try:
            async with client.chat.completions.with_streaming_response.create(
                **upstream_body, extra_body={"nilrag": nilrag}
            ) as response:
                await response.read()
                data = response.http_response.json()
        except APIStatusError as e:
            raise _upstream_error(e.response) from e
        except APIConnectionError as e:
            logger.error(f"Upstream connection failed: {e}")
            raise TransportError(details=str(e) or "Unknown error") from e
        except httpx.HTTPError as e:
            # SDK 读取错误响应体失败时抛出的是原始 httpx 异常
            status_error = _find_status_error(e)
            if status_error is not None:
                raise _upstream_error(status_error.response) from e
            logger.error(f"Upstream transport failed: {e}")
            raise TransportError(details=str(e) or "Unknown error") from e
        except ValueError as e:
            logger.error(f"Upstream returned invalid JSON: {e}")
            raise TransportError(details=str(e) or "Unknown error") from e

        logger.debug(f"External API response: {data}")
        return data

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


def _find_status_error(exc: BaseException) -> Optional[httpx.HTTPStatusError]:
    """沿异常链查找上游状态码错误."""
    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, httpx.HTTPStatusError):
            return exc
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return None


def _upstream_error(response: httpx.Response) -> UpstreamError:
    error_text = _read_body_text(response)
    logger.error(f"API Error Status: {response.status_code}")
    logger.error(f"API Error Headers: {dict(response.headers)}")
    logger.error(f"API Error Body: {error_text}")
    return UpstreamError(response.status_code, error_text)


def _read_body_text(response: httpx.Response) -> str:
    """尽力读取错误响应体，未读取完成时返回空字符串."""
    try:
        return response.text
    except httpx.StreamError as e:
        logger.warning(f"Failed to read upstream error body: {e}")
        return ""
