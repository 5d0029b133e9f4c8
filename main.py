"""
Career Coach Bridge - FastAPI proxy between the coaching chat client and the upstream LLM API.
Injects the server-held credential, retries transient upstream failures and relays event streams.
"""
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler as default_http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from config import Config
from routes import chat
from utils.errors import ProxyError
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    yield
    await HTTPClientManager.close_all()

app = FastAPI(title=Config.APP_TITLE, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ProxyError)
async def proxy_exception_handler(request: Request, exc: ProxyError):
    """Answer proxy failures with the structured error body."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Answer wrong-method requests in plain text; other HTTP errors keep the default body."""
    if exc.status_code == 405:
        return PlainTextResponse("Method Not Allowed", status_code=405, headers=exc.headers)
    return await default_http_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with user-friendly messages"""
    errors = exc.errors()
    app_logger.error(f"Validation error for {request.url}")
    app_logger.error(f"Errors: {errors}")

    message = "Invalid request body"
    if errors:
        first_error = errors[0]
        field = first_error.get('loc', [])[-1] if first_error.get('loc') else 'body'
        message = f"{field}: {first_error.get('msg', 'Validation error')}"

    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "message": message,
                "details": [
                    {"msg": e.get('msg'), "type": e.get('type'), "loc": list(e.get('loc', []))}
                    for e in errors
                ]
            }
        },
    )


#root endpoint
@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"message": "Career Coach Bridge is running"}

app.include_router(chat.router, tags=["chat"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
