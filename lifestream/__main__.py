"""Run the API with uvicorn on the configured host and port."""

import uvicorn

from lifestream.config import settings


def main() -> None:
    uvicorn.run(
        "lifestream.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
