# main.py

from app import app
from app.configs import settings


def main() -> None:
    from uvicorn import run

    run(
        "app:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.is_development,
        server_header=False,
        proxy_headers=True,
    )


if __name__ == "__main__":
    __all__ = ["app"]
    main()
