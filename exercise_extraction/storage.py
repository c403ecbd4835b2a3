from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from .exceptions import ResultLoadError
from .models import ExtractionResult


@dataclass
class ExtractionPaths:
    document_id: str
    exercise_dir: Path
    exercise_file: Path


class ExtractionStorage:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def build_paths(self, document_id: str) -> ExtractionPaths:
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        exercise_dir = self.data_dir / document_id / "exercises"
        exercise_dir.mkdir(parents=True, exist_ok=True)
        exercise_file = exercise_dir / f"{document_id}_{timestamp}.json"
        return ExtractionPaths(
            document_id=document_id,
            exercise_dir=exercise_dir,
            exercise_file=exercise_file,
        )

    def save(self, result: ExtractionResult) -> ExtractionPaths:
        paths = self.build_paths(result.document_id)
        result.save(str(paths.exercise_file))
        return paths

    def load(self, path: str) -> ExtractionResult:
        try:
            return ExtractionResult.load(path)
        except (OSError, ValueError, ValidationError) as exc:
            raise ResultLoadError(path, exc) from exc

    def latest(self, document_id: str) -> Path | None:
        exercise_dir = self.data_dir / document_id / "exercises"
        if not exercise_dir.is_dir():
            return None
        files = sorted(exercise_dir.glob(f"{document_id}_*.json"))
        return files[-1] if files else None
