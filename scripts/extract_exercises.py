import argparse
import json
import logging
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from exercise_extraction.app import create_app
from exercise_extraction.config import ExtractionServiceConfig, parse_strategy_order
from exercise_extraction.exceptions import ExerciseExtractionError, format_error_chain
from exercise_extraction.logging_config import get_logger, setup_logging
from exercise_extraction.models import ExtractionResult
from exercise_extraction.service import ExtractionService
import uvicorn

logger = get_logger("scripts.extract_exercises")


def build_config(strategies: str | None) -> ExtractionServiceConfig:
    config = ExtractionServiceConfig.from_env()
    if strategies:
        config.extraction = config.extraction.with_strategy_order(parse_strategy_order(strategies))
    return config


def print_result(result: ExtractionResult) -> None:
    print(f"document_id: {result.document_id}")
    print(f"strategy: {result.strategy.value if result.strategy else 'none'}")
    print(f"exercises: {result.total_exercises}")
    if result.is_fallback:
        print("warning: could not find distinct exercises, returned the whole document")
    print(json.dumps(result.to_records(), ensure_ascii=False, indent=2))


def run_extract(service: ExtractionService, input_path: str, output_path: str | None) -> None:
    result, stored_path = service.extract_and_save(input_path)
    print(f"output_path: {stored_path}")
    print_result(result)
    if output_path:
        result.save(output_path)
        logger.info("Saved a copy to %s", output_path)


def run_latest(service: ExtractionService, document_id: str) -> None:
    result = service.load_latest(document_id)
    if result is None:
        print(f"No saved result for {document_id}")
        return
    print_result(result)


def run_server(config: ExtractionServiceConfig, host: str, port: int) -> None:
    app = create_app(config)
    uvicorn.run(app, host=host, port=port)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Exercise extraction runner (CLI extraction or API server)."
    )
    parser.add_argument("--serve", action="store_true", help="Run FastAPI server")
    parser.add_argument("--host", default="0.0.0.0", help="Server host")
    parser.add_argument("--port", type=int, default=8004, help="Server port")
    parser.add_argument("--input", help="Path to a transcript text file")
    parser.add_argument("--output", help="Optional output path for result JSON")
    parser.add_argument("--latest", metavar="DOCUMENT_ID", help="Show the last saved result")
    parser.add_argument(
        "--strategies",
        help="Comma-separated strategy order, e.g. smart_math,delimiter",
    )
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    try:
        config = build_config(args.strategies)
    except ValueError as exc:
        parser.error(str(exc))

    setup_logging(logging.DEBUG if args.verbose else config.log_level, log_file=args.log_file)

    if args.serve:
        run_server(config, args.host, args.port)
        return

    service = ExtractionService(config)
    try:
        if args.latest:
            run_latest(service, args.latest)
        elif args.input:
            run_extract(service, args.input, args.output)
        else:
            parser.error("Provide --input, --latest or use --serve to run the API.")
    except ExerciseExtractionError as exc:
        logger.error("%s", format_error_chain(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
