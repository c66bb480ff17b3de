"""Run the exporter: python -m ikuai_exporter"""

import logging

import uvicorn

from .config import get_config, get_settings
from .main import create_app


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.debug:
        # One INFO line per request otherwise
        logging.getLogger("httpx").setLevel(logging.WARNING)

    config = get_config()
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
