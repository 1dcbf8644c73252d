"""OpenAPI metadata and customization utilities.

Provides a helper to enrich the generated OpenAPI schema with:
- Tags metadata
- Bearer token security scheme with per-path overrides

This keeps documentation concerns decoupled from the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_PUBLIC_PATHS = ("/health", "/health/ready", "/api/auth/register", "/api/auth/login")


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add metadata and security.

    - Injects components.securitySchemes for Bearer auth (``Authorization`` header)
    - Marks all operations as requiring the token by default, then exempts
      health and register/login by setting ``security: []``
    - Adds tags metadata if not present
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "BearerAuth",
            {
                "type": "http",
                "scheme": "bearer",
                "description": "Session token returned by /api/auth/register or /api/auth/login.",
            },
        )

        schema.setdefault("security", [{"BearerAuth": []}])

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {"name": "Auth", "description": "Registration, login and sessions."},
            {"name": "User", "description": "Profile, password, avatar and account deletion."},
            {"name": "Employees", "description": "Employees of the authenticated owner."},
            {"name": "Work records", "description": "Kilograms collected per employee and day."},
            {
                "name": "Payments",
                "description": "Payments and pending kilograms since each employee's latest payment.",
            },
            {"name": "Dispatch", "description": "Kilograms shipped out."},
            {"name": "Configuration", "description": "Per-owner settings such as the payment rate."},
            {"name": "Dashboard", "description": "Aggregated metrics."},
            {"name": "Health", "description": "Liveness and readiness checks."},
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        paths = schema.get("paths", {})
        for path, methods in paths.items():
            if path in _PUBLIC_PATHS:
                for method_obj in methods.values():
                    if isinstance(method_obj, dict):
                        method_obj["security"] = []

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
