"""代理服务异常定义."""

from typing import Any, Dict


class ProxyError(Exception):
    """代理异常基类."""

    status_code = 500
    default_message = "Failed to process chat request"

    def __init__(self, message: str = None, details: str = ""):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class ConfigurationError(ProxyError):
    """上游地址或密钥未配置."""

    default_message = "Server configuration error"


class UpstreamError(ProxyError):
    """上游返回非2xx状态码."""

    def __init__(self, status_code: int, raw_body: str = ""):
        self.status_code = status_code
        self.raw_body = raw_body
        super().__init__(f"External API error: {status_code}", raw_body)


class TransportError(ProxyError):
    """网络异常、超时或JSON解析失败."""
