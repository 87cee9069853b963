"""OpenAPI customization: API key security scheme and tag metadata."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

# Paths reachable without an API key
_PUBLIC_PATH_SUFFIXES = ("/health", "/authentication/login")

_TAGS = [
    {"name": "Authentication", "description": "Login with per-email throttling."},
    {"name": "Users", "description": "User management."},
    {"name": "Items", "description": "Item inventory."},
    {"name": "Health", "description": "Liveness checks."},
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch OpenAPI generation to document the X-API-Key requirement.

    Every operation requires the key by default; public paths are exempted
    with ``security: []``.
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        security_schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "ApiKeyAuth",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "Provide your API key via the X-API-Key header.",
            },
        )
        schema.setdefault("security", [{"ApiKeyAuth": []}])

        tags = schema.setdefault("tags", [])
        existing = {t.get("name") for t in tags}
        tags.extend(tag for tag in _TAGS if tag["name"] not in existing)

        for path, methods in schema.get("paths", {}).items():
            if path.endswith(_PUBLIC_PATH_SUFFIXES):
                for operation in methods.values():
                    if isinstance(operation, dict):
                        operation["security"] = []

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
