import sys
import logging

from pydantic import ValidationError

from config import get_settings
from engine import PaymentsEngine
from snapshot import take_snapshot, write_snapshots

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format=settings.log_format,
        stream=sys.stderr,
    )

    if len(argv) != 1:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    filepath = argv[0]
    engine = PaymentsEngine(settings)
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Could not read {filepath}: {e}")
        return 1

    try:
        write_snapshots(take_snapshot(accounts), sys.stdout)
        sys.stdout.flush()
    except OSError as e:
        logger.error(f"Could not write output: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
