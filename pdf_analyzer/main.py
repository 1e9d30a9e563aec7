"""
FastAPI application for the PDF Analyzer Backend.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import APIRouter, Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from .config import Settings, get_settings, settings, validate_required_settings
from .errors import AnalyzerError, ValidationError
from .models import AnalyzeResponse, ConnectionTestResponse, ErrorResponse, HealthResponse
from .services import AnalysisService, AssistantService
from .services.upload_storage import save_upload
from .utils import format_timestamp

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one assistant client for the whole process
    try:
        validate_required_settings()
    except ValueError as e:
        logger.error(f"Configuration validation failed: {e}")
        raise

    assistant_service = AssistantService(settings=settings)
    app.state.shutdown_event = asyncio.Event()
    app.state.analysis_service = AnalysisService(assistant_service, settings=settings)
    logger.info("Analysis service ready.")
    yield
    # Shutdown: stop pending polls, then release the client
    app.state.shutdown_event.set()
    await assistant_service.close()


# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Upload a PDF and get an AI assistant's analysis of it",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_analysis_service(request: Request) -> AnalysisService:
    """Analysis service created at startup."""
    return request.app.state.analysis_service


def get_shutdown_event(request: Request) -> Optional[asyncio.Event]:
    return getattr(request.app.state, "shutdown_event", None)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump()
    )


@app.exception_handler(AnalyzerError)
async def analyzer_exception_handler(request, exc: AnalyzerError):
    """Turn analyzer failures into the JSON error envelope."""
    logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request, exc: RequestValidationError):
    """Report malformed form fields in the JSON error envelope instead of FastAPI's 422."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid field '{field}': {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    logger.error(f"Request validation failed on {request.url.path}: {message}")
    return _error_response(400, message)


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {str(exc)}")
    return _error_response(
        500,
        str(exc) if settings.debug else "An unexpected error occurred"
    )


@app.get("/", response_model=dict)
async def root():
    """Root endpoint."""
    return {
        "message": "PDF Analyzer API is running",
        "version": settings.app_version,
        "timestamp": format_timestamp()
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness check endpoint."""
    return HealthResponse(
        status="healthy",
        message="Service health check completed",
        version=settings.app_version,
        timestamp=format_timestamp()
    )


router = APIRouter(prefix="/api")


@router.get("/test-connection", response_model=ConnectionTestResponse)
async def test_connection(analysis_service: AnalysisService = Depends(get_analysis_service)):
    """Verify the assistant service is reachable by creating a throwaway assistant."""
    try:
        assistant_id = await analysis_service.test_connection()
    except AnalyzerError:
        raise
    except Exception as e:
        logger.error(f"Connection test failed: {str(e)}")
        return _error_response(500, str(e))

    return ConnectionTestResponse(
        message="Connection successful",
        assistant_id=assistant_id
    )


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_pdf(
    pdf: Optional[UploadFile] = File(default=None),
    question: Optional[str] = Form(default=None),
    analysis_service: AnalysisService = Depends(get_analysis_service),
    shutdown_event: Optional[asyncio.Event] = Depends(get_shutdown_event),
    app_settings: Settings = Depends(get_settings)
):
    """
    Analyze an uploaded PDF.

    The upload is staged on disk for the duration of the request and always removed.
    """
    if pdf is None:
        raise ValidationError("No PDF file uploaded")

    if pdf.content_type != PDF_MIME_TYPE:
        raise ValidationError("Only PDF files are allowed")

    content = await pdf.read()

    # Validate file size
    if len(content) > app_settings.max_file_size_mb * 1024 * 1024:
        file_size_mb = len(content) / (1024 * 1024)
        raise ValidationError(
            f"File {pdf.filename} is too large: {file_size_mb:.1f}MB. "
            f"Maximum size is {app_settings.max_file_size_mb}MB."
        )

    try:
        pdf_path = await save_upload(pdf, content, app_settings.upload_dir)
        analysis = await analysis_service.analyze_file(
            pdf_path,
            question=question or None,
            cancel_event=shutdown_event
        )
    except AnalyzerError:
        raise
    except Exception as e:
        logger.error(f"Error processing PDF: {str(e)}")
        return _error_response(500, str(e))

    return AnalyzeResponse(analysis=analysis)


app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pdf_analyzer.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
