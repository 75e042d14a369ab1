"""应用配置管理模块."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "meta-llama/Llama-3.1-8B-Instruct"


class Settings(BaseSettings):
    """应用配置类."""

    # 上游服务连接信息，缺失时由代理在每次请求时报错
    nilai_api_url: Optional[str] = Field(default=None)
    nilai_api_key: Optional[str] = Field(default=None)
    default_model: str = Field(default=DEFAULT_MODEL)
    request_timeout: int = Field(default=60, ge=1, le=600)
    log_level: str = Field(default="INFO")
    # 客户端设置
    proxy_url: str = Field(default="http://127.0.0.1:18000")
    quiet_interval_ms: int = Field(default=1000, ge=0, le=60000)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @property
    def is_upstream_configured(self) -> bool:
        """上游地址和密钥是否都已配置."""
        return bool(self.nilai_api_url) and bool(self.nilai_api_key)


class ChatDefaults(BaseModel):
    """聊天请求的默认参数，字段缺失或为假值时生效."""

    model: str = DEFAULT_MODEL
    temperature: float = 0.2
    top_p: float = 0.95
    max_tokens: int = 2048
    stream: bool = False
    nilrag: Dict[str, Any] = Field(default_factory=dict)

    def apply(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        生成带默认值的上游请求体.

        Args:
            payload: 客户端提交的请求体，messages原样透传

        Returns:
            新的请求体字典，不修改传入对象
        """
        return {
            "model": payload.get("model") or self.model,
            "messages": payload.get("messages"),
            "temperature": payload.get("temperature") or self.temperature,
            "top_p": payload.get("top_p") or self.top_p,
            "max_tokens": payload.get("max_tokens") or self.max_tokens,
            "stream": payload.get("stream") or self.stream,
            "nilrag": payload.get("nilrag") or dict(self.nilrag),
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChatDefaults":
        return cls(model=settings.default_model)


settings = Settings()
