"""Entry point for running the bookmarks API."""
import logging
import os

import uvicorn


def main() -> None:
    """Run the API with uvicorn."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    uvicorn.run("api.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
