from __future__ import annotations

import logging

from prompt_charter.infrastructure.config import get_settings
from prompt_charter.interface.cli import app


def main() -> None:
    """Configure logging and run the CLI."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    app()


if __name__ == "__main__":
    main()
