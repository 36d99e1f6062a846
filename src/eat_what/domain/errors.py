"""Errors raised while analyzing a meal request.

Every error carries a ``user_message`` that is safe to return to the caller.
Diagnostic detail (upstream bodies, raw model replies) stays on the exception
for logging and never reaches the response.
"""


class AnalysisError(Exception):
    """Base class for failures surfaced to the caller as ``{"error": ...}``."""

    user_message = "服务器内部错误"

    def __init__(self, user_message: str | None = None) -> None:
        if user_message is not None:
            self.user_message = user_message
        super().__init__(self.user_message)


class ConfigurationError(AnalysisError):
    """The model API credential is missing."""

    user_message = "API密钥未配置"


class InvalidRequest(AnalysisError):
    """The request body is not a JSON object of the expected shape."""

    user_message = "请求格式无效"


class PayloadTooLarge(AnalysisError):
    """The request body or embedded image exceeds its size ceiling."""

    user_message = "请求体过大，请使用较小的图片"

    def __init__(self, size: int, limit: int, user_message: str | None = None) -> None:
        self.size = size
        self.limit = limit
        super().__init__(user_message)


class UpstreamTimeout(AnalysisError):
    """The model call timed out or never reached the upstream."""

    user_message = "请求超时，请尝试使用较小的图片或稍后再试"


class UpstreamError(AnalysisError):
    """The model API replied with a failure status, an error or no content."""

    def __init__(
        self, status_code: int | None, body: str, provider_message: str | None = None
    ) -> None:
        self.status_code = status_code
        self.body = body
        if provider_message is not None:
            message = f"API返回错误: {provider_message}"
        elif status_code is None:
            message = "API返回的内容为空"
        else:
            message = f"API调用失败 ({status_code})"
        super().__init__(message)


class UnparseableResponse(AnalysisError):
    """Neither direct parsing nor brace extraction produced a JSON object."""

    user_message = "无法解析API返回的JSON格式"

    def __init__(self, raw_reply: str) -> None:
        self.raw_reply = raw_reply
        super().__init__()
