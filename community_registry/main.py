from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from community_registry.api.v1.routes.api import router as api_router
from community_registry.api.v1.routes.auth import router as auth_router
from community_registry.api.v1.routes.registration import router as registration_router
from community_registry.api.v1.routes.statistics import router as statistics_router
from community_registry.api.v1.routes.submission import router as submission_router
from community_registry.api.v1.routes.dropdown_option import router as dropdown_option_router

from community_registry.core.config import (
    PROJECT_NAME,
    VERSION,
    DESCRIPTION,
    DEBUG,
    DOCS_URL,
    API_PREFIX,
    PRELOAD_STORAGE,
    SESSION_COOKIE_NAME,
)
from community_registry.core.events import create_lifespan
from community_registry.core.middleware.debug_middleware import debug_middleware


def custom_openapi(app: FastAPI):
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "AdminSession": {
            "type": "apiKey",
            "in": "cookie",
            "name": SESSION_COOKIE_NAME,
        },
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT"
        }
    }

    # Admin paths accept either the session cookie or a bearer token
    admin_prefix = f"{API_PREFIX}/admin"
    for path, operations in openapi_schema["paths"].items():
        if not path.startswith(admin_prefix) or path == f"{admin_prefix}/login":
            continue
        for operation in operations.values():
            operation["security"] = [
                {"AdminSession": []},
                {"BearerAuth": []}
            ]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


def get_application() -> FastAPI:
    app = FastAPI(
        title=PROJECT_NAME,
        debug=DEBUG,
        version=VERSION,
        description=DESCRIPTION,
        docs_url=DOCS_URL,
        lifespan=create_lifespan(PRELOAD_STORAGE),
    )

    # Public health, submission and catalog endpoints
    app.include_router(api_router, prefix=API_PREFIX)
    app.include_router(submission_router, prefix=f"{API_PREFIX}/registrations")
    app.include_router(dropdown_option_router, prefix=f"{API_PREFIX}/dropdown-options")

    # Admin endpoints
    app.include_router(auth_router, prefix=f"{API_PREFIX}/admin")
    app.include_router(registration_router, prefix=f"{API_PREFIX}/admin/registrations")
    app.include_router(statistics_router, prefix=f"{API_PREFIX}/admin")

    if DEBUG:
        app.middleware("http")(debug_middleware)

    # Override OpenAPI schema generation with the admin security schemes
    app.openapi = lambda: custom_openapi(app)

    return app


app = get_application()
