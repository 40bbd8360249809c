import base64
import binascii
import re

FORMAT_TO_MEDIA_TYPE = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,]*)?;base64,", re.IGNORECASE)


def detect_mime_type(image_bytes: bytes) -> str | None:
    fmt = _detect_image_format(image_bytes)
    if fmt is None:
        return None
    return FORMAT_TO_MEDIA_TYPE[fmt]


def _detect_image_format(image_bytes: bytes) -> str | None:
    if image_bytes[:8] == b"\x89PNG\r\n\x1a\n":
        return "png"
    if image_bytes[:2] == b"\xff\xd8":
        return "jpeg"
    if image_bytes[:6] in (b"GIF87a", b"GIF89a"):
        return "gif"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "webp"
    return None


def split_data_url(data: str) -> tuple[str, str | None]:
    """Strip a ``data:<mime>;base64,`` prefix, returning the payload and the declared type."""
    m = _DATA_URL_RE.match(data)
    if not m:
        return data, None
    mime = m.group("mime")
    return data[m.end():], mime.lower() if mime else None


def decode_base64(data: str) -> bytes:
    payload, _ = split_data_url(data.strip())
    payload = "".join(payload.split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 payload: {e}") from e


def encode_base64(image_bytes: bytes) -> str:
    return base64.b64encode(image_bytes).decode("ascii")


def normalize_mime_type(mime_type: str) -> str:
    mime_type = mime_type.strip().lower()
    if mime_type == "image/jpg":
        return "image/jpeg"
    return mime_type


def is_allowed_mime_type(mime_type: str, allowed: list[str]) -> bool:
    return normalize_mime_type(mime_type) in {normalize_mime_type(m) for m in allowed}
