import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from volunteer_hub.config import settings
from volunteer_hub.database import SessionLocal, init_db
from volunteer_hub.errors import ApiError
from volunteer_hub.routers import (
    applications,
    auth,
    calendar,
    categories,
    jobs,
    logs,
    migrate,
    users,
    volunteer_signup,
    volunteers,
    zipcodes,
)
from volunteer_hub.services.migration_service import ensure_bootstrap_admin, integrity_check

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("volunteer_hub")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: migrate and integrity-check an existing database
    if settings.db_path.exists():
        try:
            init_db(settings.db_path)
            with SessionLocal() as db:
                ensure_bootstrap_admin(db)
                integrity_check(db)
        except (OSError, SQLAlchemyError) as exc:
            logger.error("Could not run startup migration/integrity check: %s", exc)
    yield


app = FastAPI(
    title="Volunteer Hub",
    description="Volunteer opportunity board, applications and service-hour logs",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    missing = [
        str(err["loc"][-1])
        for err in errors
        if err.get("type") == "missing" and len(err.get("loc", ())) > 1 and err["loc"][0] == "body"
    ]
    if missing and len(missing) == len(errors):
        return JSONResponse(
            status_code=400,
            content={"error": f"Missing required fields: {', '.join(missing)}", "details": missing},
        )
    details = [{"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")} for err in errors]
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(jobs.router, prefix=settings.api_prefix)
app.include_router(applications.router, prefix=settings.api_prefix)
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(categories.router, prefix=settings.api_prefix)
app.include_router(logs.router, prefix=settings.api_prefix)
app.include_router(volunteers.router, prefix=settings.api_prefix)
app.include_router(volunteer_signup.router, prefix=settings.api_prefix)
app.include_router(zipcodes.router, prefix=settings.api_prefix)
app.include_router(calendar.router, prefix=settings.api_prefix)
app.include_router(migrate.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("volunteer_hub.main:app", host=settings.host, port=settings.port)
