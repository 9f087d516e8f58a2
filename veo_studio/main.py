from fastapi import BackgroundTasks, Cookie, Depends, FastAPI, Form, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from typing import Optional
import logging

from veo_studio.models.video import ErrorResponse, GenerateVideoRequest, GenerateVideoResponse
from veo_studio.services.generation_service import generate_video
from veo_studio.services.genai_service import VideoGenerationUpstream, get_upstream
from veo_studio.core.config import settings
from veo_studio.core.errors import BridgeGenerationError, InvalidRequest
from veo_studio.client.render import render_studio_page
from veo_studio.client.session import StudioSessions, SubmissionRejected, get_studio_sessions

# --- Logging Setup ---
logging.basicConfig(level=settings.log_level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- FastAPI App Initialization ---
app = FastAPI(title="Veo Video Generation Bridge")

def _error_response(error: BridgeGenerationError) -> JSONResponse:
    # Diagnostics only ever accompany 500-class bodies, and never in production
    show_details = not settings.is_production and error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR
    body = ErrorResponse(
        error=error.message,
        details=error.details if show_details else None,
    )
    return JSONResponse(status_code=error.status_code, content=body.model_dump(exclude_none=True))

# --- Exception Handlers ---
@app.exception_handler(BridgeGenerationError)
async def bridge_error_handler(request: Request, exc: BridgeGenerationError):
    return _error_response(exc)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Unparseable bodies get the same answer as missing fields
    logger.warning(f"Rejected malformed generation request: {len(exc.errors())} validation error(s)")
    return _error_response(InvalidRequest())

# --- Studio Page (Client Submission UI) ---
STUDIO_COOKIE = "studio_session"

def _studio_page(session_id: str, html: str, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    response = HTMLResponse(content=html, status_code=status_code)
    response.set_cookie(STUDIO_COOKIE, session_id, httponly=True, samesite="lax")
    return response

@app.get("/", response_class=HTMLResponse)
async def studio_page(
    studio_session: Optional[str] = Cookie(default=None),
    sessions: StudioSessions = Depends(get_studio_sessions),
):
    """Submission form plus this browser's generation records."""
    session_id, session = sessions.get_or_create(studio_session)
    return _studio_page(session_id, render_studio_page(session.records))

@app.post("/studio", response_class=HTMLResponse)
async def studio_submit(
    background_tasks: BackgroundTasks,
    prompt: str = Form(""),
    api_key: str = Form(""),
    studio_session: Optional[str] = Cookie(default=None),
    sessions: StudioSessions = Depends(get_studio_sessions),
):
    """Records a pending generation and resolves it in the background."""
    session_id, session = sessions.get_or_create(studio_session)
    try:
        record = session.start(prompt, api_key)
    except SubmissionRejected as e:
        html = render_studio_page(session.records, alert=str(e), prompt=prompt)
        return _studio_page(session_id, html, status_code=status.HTTP_400_BAD_REQUEST)

    background_tasks.add_task(session.complete, record.identifier, prompt, api_key)
    logger.info(f"[{record.identifier}] Generation task added to background.")

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(STUDIO_COOKIE, session_id, httponly=True, samesite="lax")
    return response

@app.get("/health")
async def read_health():
    return {"message": "Video Generation Bridge is running."}

# --- API Endpoints ---

@app.post(
    "/generate",
    response_model=GenerateVideoResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_video_endpoint(
    request: GenerateVideoRequest,
    upstream: VideoGenerationUpstream = Depends(get_upstream),
):
    """Forwards one prompt to the generative API and returns a playable video reference."""
    logger.info("Received video generation request")
    result = await generate_video(request.prompt, request.credential, upstream)
    return GenerateVideoResponse(video_url=result.video_url)

# Path used by the original web client
app.add_api_route(
    "/api/generate",
    generate_video_endpoint,
    methods=["POST"],
    response_model=GenerateVideoResponse,
    response_model_by_alias=True,
    include_in_schema=False,
)

# --- Uvicorn Runner (for local development) ---
if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Uvicorn server...")
    uvicorn.run("veo_studio.main:app", host=settings.host, port=settings.port, reload=not settings.is_production)
