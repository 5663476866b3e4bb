from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Tablebase API",
            version="0.1.0",
            summary="User-defined bases with typed fields and linked records",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "ActorHeader": {
                "type": "apiKey",
                "in": "header",
                "name": "X-User-Id",
                "description": "ID of the authenticated user, set by the auth gateway",
            },
        }
        openapi_schema["security"] = [{"ActorHeader": []}]

        # Health check is public
        health = openapi_schema["paths"].get("/health", {}).get("get")
        if health is not None:
            health["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Base '6f1c...' not found", "type": "not_found"},
                {"message": "Option 'Open' already exists in field '2b7e...'", "type": "conflict"},
                {"message": "Value for number field must be a number, got str", "type": "validation_error"},
                {"message": "Field 'Status' not found", "type": "bad_request"},
            ]
        }
    }
