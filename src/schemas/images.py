from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class ImageBlob:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class EditRequest:
    image: ImageBlob
    instruction: str
    base_instruction: str

    @property
    def prompt(self) -> str:
        extra = self.instruction.strip()
        if not extra:
            return self.base_instruction
        return f"{self.base_instruction} {extra}"


@dataclass(frozen=True)
class EditResult:
    image: ImageBlob


class ImageEditRequest(BaseModel):
    data: str
    mime_type: str | None = None
    instruction: str = ""


class ImageEditResponse(BaseModel):
    data: str
    mime_type: str


class HealthResponse(BaseModel):
    status: str
    model: str
    configured: bool
