import logging
from pathlib import Path

from .config import ExtractionServiceConfig
from .coordinator import ExerciseExtractor
from .exceptions import InputTooLargeError, TranscriptNotFoundError
from .models import ExtractionConfig, ExtractionResult
from .storage import ExtractionStorage

logger = logging.getLogger(__name__)


class ExtractionService:
    def __init__(self, config: ExtractionServiceConfig | None = None):
        self.config = config or ExtractionServiceConfig()
        self.extractor = ExerciseExtractor(self.config.extraction)
        self.storage = ExtractionStorage(self.config.data_dir)

    def extract_text(
        self,
        text: str,
        document_id: str = "inline",
        source: str = "inline",
        extraction: ExtractionConfig | None = None,
    ) -> ExtractionResult:
        text = text or ""
        if len(text) > self.config.max_input_chars:
            raise InputTooLargeError(len(text), self.config.max_input_chars)

        extractor = ExerciseExtractor(extraction) if extraction else self.extractor
        result = extractor.extract(text, source=source, document_id=document_id)
        logger.info(
            "Extracted %d exercises from %s (strategy: %s)",
            result.total_exercises,
            source,
            result.strategy.value if result.strategy else "none",
        )
        return result

    def extract_file(self, transcript_path: str) -> ExtractionResult:
        path = Path(transcript_path)
        if not path.is_file():
            raise TranscriptNotFoundError(transcript_path)
        text = path.read_text(encoding="utf-8")
        return self.extract_text(text, document_id=path.stem, source=str(path))

    def extract_and_save(self, transcript_path: str) -> tuple[ExtractionResult, str]:
        result = self.extract_file(transcript_path)
        paths = self.storage.save(result)
        return result, str(paths.exercise_file)

    def save(self, result: ExtractionResult) -> str:
        paths = self.storage.save(result)
        return str(paths.exercise_file)

    def load_latest(self, document_id: str) -> ExtractionResult | None:
        """Most recent saved result of a document, or None when nothing was saved."""
        path = self.storage.latest(document_id)
        if path is None:
            return None
        return self.storage.load(str(path))
