"""Client for the remote image-edit model.

One call to :meth:`ImageEditClient.edit_image` issues exactly one
``generateContent`` request and either returns the first image part of the
response or raises a :class:`~src.core.exceptions.ServiceError`.
"""

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from src.config import Settings
from src.core.exceptions import ConfigurationError, NoImageInResponse, TransportFailure
from src.schemas.images import EditRequest, EditResult, ImageBlob
from src.services import image_codec

logger = structlog.get_logger()

FAILURE_PREFIX = "Failed to edit image"


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    model: str = "gemini-2.5-flash-image"
    api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float = 120.0
    base_instruction: str = "convert this image to pixel art"

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientConfig":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            api_base=settings.gemini_api_base,
            timeout=settings.request_timeout,
            base_instruction=settings.base_instruction,
        )


class ImageEditClient:
    def __init__(self, config: ClientConfig, http_client: httpx.AsyncClient | None = None) -> None:
        if not config.api_key or not config.api_key.strip():
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set.")
        self.config = config
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout)

    @property
    def url(self) -> str:
        return f"{self.config.api_base.rstrip('/')}/models/{self.config.model}:generateContent"

    def build_payload(self, request: EditRequest) -> dict[str, Any]:
        return {
            "contents": [
                {
                    "parts": [
                        {
                            "inlineData": {
                                "mimeType": request.image.mime_type,
                                "data": image_codec.encode_base64(request.image.data),
                            }
                        },
                        {"text": request.prompt},
                    ]
                }
            ],
            "generationConfig": {"responseModalities": ["IMAGE"]},
        }

    async def edit_image(self, image: ImageBlob, instruction: str = "") -> EditResult:
        if not image.data:
            raise ValueError("image data is empty")

        request = EditRequest(image=image, instruction=instruction, base_instruction=self.config.base_instruction)
        headers = {"x-goog-api-key": self.config.api_key, "Content-Type": "application/json"}
        logger.info(
            "image_edit_requested",
            model=self.config.model,
            mime_type=image.mime_type,
            size=len(image.data),
            prompt=request.prompt,
        )

        try:
            response = await self._http.post(self.url, json=self.build_payload(request), headers=headers)
            response.raise_for_status()
            parts = _response_parts(response.json())
            blob = _first_image_part(parts, fallback_mime_type=image.mime_type)
        except httpx.HTTPStatusError as e:
            detail = _upstream_error_message(e.response) or str(e)
            logger.error("image_edit_failed", status_code=e.response.status_code, error=detail)
            raise TransportFailure(f"{FAILURE_PREFIX}: {detail}") from e
        except httpx.TimeoutException as e:
            detail = f"request timed out after {self.config.timeout}s ({_describe(e)})"
            logger.error("image_edit_failed", error=detail)
            raise TransportFailure(f"{FAILURE_PREFIX}: {detail}") from e
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.error("image_edit_failed", error=_describe(e), error_type=type(e).__name__)
            raise TransportFailure(f"{FAILURE_PREFIX}: {_describe(e)}") from e

        if blob is None:
            logger.warning("image_edit_no_image", model=self.config.model, parts=len(parts))
            raise NoImageInResponse()

        logger.info("image_edit_completed", mime_type=blob.mime_type, size=len(blob.data))
        return EditResult(image=blob)

    async def aclose(self) -> None:
        await self._http.aclose()


def _response_parts(body: Any) -> list[dict[str, Any]]:
    if not isinstance(body, dict):
        raise ValueError("malformed response: expected a JSON object")
    candidates = body.get("candidates") or []
    if not isinstance(candidates, list):
        raise ValueError("malformed response: 'candidates' is not a list")
    if not candidates:
        return []
    content = candidates[0].get("content") or {}
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise ValueError("malformed response: 'parts' is not a list")
    return parts


def _first_image_part(parts: list[dict[str, Any]], fallback_mime_type: str) -> ImageBlob | None:
    for part in parts:
        inline_data = part.get("inlineData") or part.get("inline_data") or {}
        data = inline_data.get("data")
        if data:
            mime_type = inline_data.get("mimeType") or inline_data.get("mime_type") or fallback_mime_type
            return ImageBlob(data=image_codec.decode_base64(data), mime_type=mime_type)
    return None


def _upstream_error_message(response: httpx.Response) -> str | None:
    try:
        error = response.json().get("error", {})
    except (ValueError, AttributeError):
        return response.text or None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text or None


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
