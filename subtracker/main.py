"""FastAPI ASGI application entrypoint."""

import uvicorn

from .core.app_factory import create_application
from .core.config import Settings

settings = Settings.from_env()
app = create_application(settings)

__all__ = ("app", "run")


def run() -> None:
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
