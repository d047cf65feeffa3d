import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run("jobboard.main:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    main()
