import csv
import logging
import sys

from pydantic import ValidationError

from csv_io import write_summaries
from engine import PaymentsEngine
from settings import get_settings

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level_number,
        format=settings.log_format,
        stream=sys.stderr,
        force=True,
    )


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: payments <input.csv>", file=sys.stderr)
        return 1

    try:
        configure_logging()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    filepath = argv[0]
    engine = PaymentsEngine()
    try:
        summaries = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        return 1
    except csv.Error as e:
        logger.error(f"Cannot parse {filepath} as CSV: {e}")
        return 1

    write_summaries(summaries, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
