from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.config import settings
from app.core.db import import_models, init_models
from app.core.errors import WorkoutError
from app.core.logger import setup_logger
from app.routers.exercises import router as exercises_router
from app.routers.progression import router as progression_router
from app.routers.sessions import router as sessions_router
from app.routers.templates import router as templates_router
from app.routers.users import router as users_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logger(settings.LOG_LEVEL)
    if settings.CREATE_TABLES:
        await init_models()
    else:
        import_models()
    yield


app = FastAPI(title="Workout Sessions API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorkoutError)
async def workout_error_handler(request: Request, exc: WorkoutError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(users_router)
app.include_router(exercises_router)
app.include_router(templates_router)
app.include_router(sessions_router)
app.include_router(progression_router)



@app.get("/health")
def health():
    return {"ok": True}
