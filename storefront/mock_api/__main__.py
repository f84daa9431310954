"""Run the mock product API with uvicorn."""

import uvicorn

from storefront.config import configure_logging
from storefront.mock_api.main import MockAPISettings, create_app


def main() -> None:
    settings = MockAPISettings()
    configure_logging("INFO", json_logs=False)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
