from dataclasses import dataclass, field
import os

from .models import ExtractionConfig, StrategyName


@dataclass
class ExtractionServiceConfig:
    data_dir: str = "data/exercises"
    max_input_chars: int = 200_000
    log_level: str = "INFO"
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)

    @classmethod
    def from_env(cls) -> "ExtractionServiceConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _bool(name: str, default: bool) -> bool:
            value = os.environ.get(name)
            if not value:
                return default
            return value.strip().lower() in ("1", "true", "yes", "on")

        defaults = ExtractionConfig()
        extraction_values = {
            "fallback_answer_chars": _int(
                "EXERCISE_FALLBACK_ANSWER_CHARS", defaults.fallback_answer_chars
            ),
            "reconcile_duplicates": _bool(
                "EXERCISE_RECONCILE_DUPLICATES", defaults.reconcile_duplicates
            ),
        }
        order = os.environ.get("EXERCISE_STRATEGY_ORDER")
        if order:
            extraction_values["strategy_order"] = parse_strategy_order(order)

        return cls(
            data_dir=os.environ.get("EXERCISE_DATA_DIR", cls.data_dir),
            max_input_chars=_int("EXERCISE_MAX_INPUT_CHARS", cls.max_input_chars),
            log_level=os.environ.get("EXERCISE_LOG_LEVEL", cls.log_level),
            extraction=ExtractionConfig(**extraction_values),
        )


def parse_strategy_order(value: str) -> list[StrategyName]:
    """Parse "smart_math,delimiter" into strategy names; unknown names raise ValueError."""
    return [StrategyName(name.strip()) for name in value.split(",") if name.strip()]
