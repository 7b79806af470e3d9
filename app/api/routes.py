"""
Document analysis endpoints.

POST    /analyze  - multipart ``question`` + ``file_0..file_N``; always answers 200
                    with an AnalysisResult body, errors embedded in ``error``.
OPTIONS /analyze  - permissive CORS preflight.
GET     /health   - provider configuration status.
"""
from fastapi import APIRouter, Query, Request, Response, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from app.analysis.models import AnalysisResult, epoch_millis
from app.api.schemas import AnalysisResultResponse, HealthResponse
from app.encoding.exceptions import EncodingError
from app.logging.logger import Log
from app.presentation.text_report import render_text_report
from app.processor.exceptions import UploadReadError
from app.submission.exceptions import SubmissionValidationError

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.post("/analyze", response_model=AnalysisResultResponse)
async def analyze(request: Request, response_format: str = Query("json", alias="format")):
    """Compare the uploaded documents against one question."""
    state = request.app.state
    form = await request.form()
    try:
        if state.processor is None:
            result = _failure(_question(form), "configuration_error", state.configuration_error)
        else:
            batch = await state.file_loader.load(form)
            result = await run_in_threadpool(
                state.processor.process, batch.question, batch.documents
            )
    except SubmissionValidationError as exc:
        Log.warning(f"Rejected analysis request ({exc.constraint}): {exc}")
        result = _failure(_question(form), "validation_error", str(exc))
    except (EncodingError, UploadReadError) as exc:
        Log.error(f"Failed to prepare documents: {exc}")
        result = _failure(_question(form), "encoding_error", f"Failed to prepare documents: {exc}")
    finally:
        await form.close()

    if response_format == "text":
        return PlainTextResponse(render_text_report(result))
    return AnalysisResultResponse.from_result(result)


@router.options("/analyze", include_in_schema=False)
async def analyze_options() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    state = request.app.state
    return HealthResponse(
        status="ok" if state.processor is not None else "degraded",
        provider=state.settings.analysis_provider,
        configured=state.processor is not None,
    )


def _failure(question: str, code: str, message: str) -> AnalysisResult:
    return AnalysisResult.degraded(
        question, code=code, explanation=message, timestamp=epoch_millis()
    )


def _question(form) -> str:
    question = form.get("question")
    return question.strip() if isinstance(question, str) else ""
