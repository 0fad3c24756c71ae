"""
Run the task backend with uvicorn:

    python -m src.task_api
"""
import uvicorn

from .settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("src.task_api.main:app", host="0.0.0.0", port=settings.server_port)


if __name__ == "__main__":
    main()
