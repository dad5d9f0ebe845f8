import logging

import registry.models  # noqa: F401
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from registry.core.config import settings
from registry.routers import auth as auth_router
from registry.routers import churches as churches_router
from registry.routers import family as family_router
from registry.routers import members as members_router
from registry.routers import pastors as pastors_router
from registry.routers import whoami as whoami_router
from registry.services.errors import RegistryError

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title="Presbytery Registry API", version="0.1.0")

logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router.router)
app.include_router(whoami_router.router)
app.include_router(pastors_router.router)
app.include_router(churches_router.router)
app.include_router(members_router.router)
app.include_router(family_router.router)


@app.exception_handler(RegistryError)
async def handle_registry_error(request: Request, exc: RegistryError) -> JSONResponse:
    logger.info(
        "registry_error",
        extra={"path": request.url.path, "code": exc.code, "detail": exc.message},
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok"}
