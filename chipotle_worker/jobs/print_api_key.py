"""Job that prints the subscription key the other jobs would use."""

import logging

from chipotle_worker.core.config import ConfigError, get_settings
from chipotle_worker.core.errors import ChipotleError
from chipotle_worker.jobs.export_locations import resolve_api_key

logger = logging.getLogger(__name__)


def run_print_api_key() -> str:
    api_key = resolve_api_key(get_settings())
    print(api_key)
    return api_key


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    try:
        run_print_api_key()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except ChipotleError as exc:
        logger.error("Key discovery failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
