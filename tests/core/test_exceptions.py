from httpx import ASGITransport, AsyncClient

from src.core.exceptions import (
    AppError,
    ConfigurationError,
    ErrorKind,
    NoImageInResponse,
    ServiceError,
    TransportFailure,
)
from src.main import app


@app.get("/_config_error")
async def _config_error_endpoint() -> None:
    raise ConfigurationError("GEMINI_API_KEY environment variable is not set.")


class TestValidationErrors:
    async def test_wrong_type_is_reported_without_docs_url(self) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/images/edit", json={"data": 123, "instruction": "8bit"})
        assert response.status_code == 422
        errors = response.json()["detail"]
        assert [e["loc"] for e in errors] == [["body", "data"]]
        assert set(errors[0]) == {"loc", "msg", "type"}
        assert errors[0]["type"] == "string_type"

    async def test_missing_image_data(self) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/images/edit", json={"instruction": "8bit"})
        assert response.status_code == 422
        errors = response.json()["detail"]
        assert errors[0]["loc"] == ["body", "data"]
        assert errors[0]["type"] == "missing"


class TestAppError:
    def test_stores_status_and_detail(self) -> None:
        err = AppError(status_code=404, detail="Not found")
        assert err.status_code == 404
        assert err.detail == "Not found"

    async def test_app_error_handler_returns_json(self) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post("/images/edit", json={"data": ""})
        assert response.status_code == 400
        assert response.json() == {"detail": "Image data is empty"}


class TestServiceError:
    def test_kinds(self) -> None:
        assert ConfigurationError("x").kind == ErrorKind.CONFIGURATION
        assert TransportFailure("x").kind == ErrorKind.TRANSPORT_FAILURE
        assert NoImageInResponse().kind == ErrorKind.NO_IMAGE_IN_RESPONSE

    def test_subclasses_share_base(self) -> None:
        for err in (ConfigurationError("x"), TransportFailure("x"), NoImageInResponse()):
            assert isinstance(err, ServiceError)

    def test_message_is_str(self) -> None:
        err = TransportFailure("Failed to edit image: boom")
        assert err.message == "Failed to edit image: boom"
        assert str(err) == "Failed to edit image: boom"

    def test_no_image_default_message(self) -> None:
        assert NoImageInResponse().message == "No image data was found in the API response."

    async def test_configuration_error_maps_to_500(self) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/_config_error")
        assert response.status_code == 500
        assert response.json() == {
            "detail": "GEMINI_API_KEY environment variable is not set.",
            "kind": "configuration",
        }
