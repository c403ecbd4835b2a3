import logging
import uuid

from fastapi import FastAPI, HTTPException

from .config import ExtractionServiceConfig
from .exceptions import InputTooLargeError, format_error_chain
from .models import ExerciseRecord, ExtractRequest, ExtractResponse
from .service import ExtractionService

logger = logging.getLogger(__name__)


def create_app(config: ExtractionServiceConfig | None = None) -> FastAPI:
    service = ExtractionService(config or ExtractionServiceConfig.from_env())
    app = FastAPI(
        title="Exercise Extraction Service",
        version="1.0.0",
        description="Extracts gradeable exercises from worksheet OCR text.",
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.post("/extract", response_model=ExtractResponse)
    def extract(request: ExtractRequest) -> ExtractResponse:
        document_id = request.document_id or uuid.uuid4().hex[:12]
        extraction = None
        if request.strategy_order:
            extraction = service.config.extraction.with_strategy_order(request.strategy_order)
        try:
            result = service.extract_text(
                request.text,
                document_id=document_id,
                extraction=extraction,
            )
            output_path = service.save(result) if request.save else None
        except InputTooLargeError as exc:
            raise HTTPException(status_code=413, detail=str(exc)) from exc
        except Exception as exc:
            logger.error("Extraction request failed:\n%s", format_error_chain(exc), exc_info=exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc

        return ExtractResponse(
            document_id=result.document_id,
            strategy=result.strategy,
            is_fallback=result.is_fallback,
            total_exercises=result.total_exercises,
            exercises=[
                ExerciseRecord(
                    identifier=exercise.identifier,
                    question=exercise.question,
                    answer=exercise.answer,
                    provenance=exercise.provenance,
                )
                for exercise in result.exercises
            ],
            output_path=output_path,
        )

    return app


app = create_app()
