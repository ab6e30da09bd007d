from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import db, log, settings
from records import errors as record_errors
from records import router as records_router


@asynccontextmanager
async def lifespan(_: FastAPI):
    log.configure_logging()
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="records-api", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(record_errors.RecordError)
async def record_error_handler(_: Request, exc: record_errors.RecordError) -> JSONResponse:
    # Logical status lives in the body; only a missing record on read is a transport 404.
    status_code = 404 if exc.status == 404 else 200
    return JSONResponse(status_code=status_code, content=exc.envelope())


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(item) for item in err.get("loc", ()) if item != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request."


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    error = record_errors.RecordInvalid(_validation_message(exc))
    return JSONResponse(status_code=200, content=error.envelope())


app.include_router(records_router.router, tags=["records"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
