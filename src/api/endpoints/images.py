import structlog
from fastapi import APIRouter, Depends, Request

from src.config import Settings
from src.core.exceptions import AppError
from src.schemas.images import ImageBlob, ImageEditRequest, ImageEditResponse
from src.services import image_codec
from src.services.image_edit import ImageEditClient

logger = structlog.get_logger()

router = APIRouter(prefix="/images")


def get_edit_client(request: Request) -> ImageEditClient:
    return request.app.state.edit_client


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _decode_upload(body: ImageEditRequest, app_settings: Settings) -> ImageBlob:
    payload, declared_mime = image_codec.split_data_url(body.data.strip())
    # base64 expands by 4/3; reject before decoding anything oversized
    if len(payload) * 3 // 4 > app_settings.max_upload_bytes + 2:
        raise AppError(status_code=413, detail="Image is too large")

    try:
        image_bytes = image_codec.decode_base64(body.data)
    except ValueError as e:
        logger.info("image_upload_rejected", reason="invalid_base64", error=str(e))
        raise AppError(status_code=400, detail="Invalid image data") from e

    if not image_bytes:
        raise AppError(status_code=400, detail="Image data is empty")
    if len(image_bytes) > app_settings.max_upload_bytes:
        raise AppError(status_code=413, detail="Image is too large")

    mime_type = body.mime_type or declared_mime or image_codec.detect_mime_type(image_bytes)
    if not mime_type or not image_codec.is_allowed_mime_type(mime_type, app_settings.allowed_mime_types):
        raise AppError(status_code=415, detail=f"Unsupported image type: {mime_type or 'unknown'}")

    return ImageBlob(data=image_bytes, mime_type=image_codec.normalize_mime_type(mime_type))


@router.post("/edit", response_model=ImageEditResponse)
async def edit_image(
    body: ImageEditRequest,
    client: ImageEditClient = Depends(get_edit_client),
    app_settings: Settings = Depends(get_settings),
) -> ImageEditResponse:
    image = _decode_upload(body, app_settings)
    result = await client.edit_image(image, body.instruction)
    return ImageEditResponse(
        data=image_codec.encode_base64(result.image.data),
        mime_type=result.image.mime_type,
    )
