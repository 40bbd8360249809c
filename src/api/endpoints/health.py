from fastapi import APIRouter, Request

from src.schemas.images import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    client = request.app.state.edit_client
    return HealthResponse(status="ok", model=client.config.model, configured=bool(client.config.api_key))
