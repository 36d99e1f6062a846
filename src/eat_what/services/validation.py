"""Request checks that run before any model call."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from eat_what.domain.errors import InvalidRequest, PayloadTooLarge
from eat_what.domain.requests import AnalyzeRequest

_logger = logging.getLogger(__name__)

MIB = 1024 * 1024


@dataclass(frozen=True)
class RequestValidator:
    """Enforce size ceilings and parse the request body."""

    max_body_bytes: int = 5 * MIB
    max_image_bytes: int = 4 * MIB

    def parse(self, body: bytes) -> AnalyzeRequest:
        """Validate a raw body and return the parsed request."""
        self.check_body_size(body)
        try:
            request = AnalyzeRequest.model_validate_json(body or b"{}")
        except ValidationError as exc:
            _logger.warning("Rejected malformed request body: %s", exc)
            raise InvalidRequest() from exc
        self.check_image_size(request)
        return request

    def check_body_size(self, body: bytes) -> None:
        """Reject bodies above the overall ceiling."""
        _logger.info("Request body size: %s bytes", len(body))
        if len(body) > self.max_body_bytes:
            raise PayloadTooLarge(len(body), self.max_body_bytes)

    def check_image_size(self, request: AnalyzeRequest) -> None:
        """Reject an embedded image above its own ceiling."""
        if not request.image:
            return
        size = len(request.image)
        _logger.info("Image data size: %s bytes", size)
        if size > self.max_image_bytes:
            raise PayloadTooLarge(
                size,
                self.max_image_bytes,
                user_message="图片过大，请使用较小的图片（建议小于2MB）",
            )
