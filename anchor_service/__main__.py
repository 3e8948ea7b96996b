"""Run the service with uvicorn: ``python -m anchor_service`` or ``anchor-service``."""

import uvicorn

from anchor_service.config import get_settings


def main() -> None:
    settings = get_settings()
    # log_config=None keeps the handlers installed by setup_logging in the lifespan
    uvicorn.run(
        "anchor_service.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
