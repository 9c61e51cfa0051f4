import json

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .logging import get_logger
from .schemas import ErrorResponse, GenerateImageRequest, GenerateImageResponse
from .services.error_classifier import GenerationError, UserFacingError
from .services.logo_generator import LogoGenerator

logger = get_logger(__name__)

app = FastAPI(title="Logo Studio Image Proxy", version="1.0.0")

# Basic CORS to allow calls from a separately hosted front end.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def render_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


def get_image_generator() -> LogoGenerator:
    if not config.SERVER_API_KEY:
        logger.error("API_KEY environment variable not set.")
        raise HTTPException(status_code=500, detail="API key is not configured on the server.")
    return LogoGenerator(api_key=config.SERVER_API_KEY)


async def parse_generate_request(request: Request) -> GenerateImageRequest:
    body = await request.body()
    try:
        payload = json.loads(body or b"{}")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON.") from exc
    if not isinstance(payload, dict) or not str(payload.get("prompt") or "").strip():
        raise HTTPException(status_code=400, detail="Prompt is required.")
    try:
        return GenerateImageRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Prompt is required.") from exc


@app.post("/generate-logo", response_model=GenerateImageResponse)
async def generate_logo(
    generator: LogoGenerator = Depends(get_image_generator),
    payload: GenerateImageRequest = Depends(parse_generate_request),
) -> GenerateImageResponse:
    try:
        image_b64 = await run_in_threadpool(generator.generate_image, payload.prompt)
    except GenerationError as exc:
        reason = exc.classified.raw_message if exc.category is UserFacingError.UNKNOWN else str(exc)
        raise HTTPException(status_code=500, detail=f"Failed to generate logo. {reason}") from exc
    except Exception as exc:
        logger.exception("Unexpected error during logo generation")
        raise HTTPException(status_code=500, detail="Failed to generate logo. An unknown error occurred.") from exc

    return GenerateImageResponse(image_b64=image_b64)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("logo_studio.main:app", host="0.0.0.0", port=8000, reload=True)
