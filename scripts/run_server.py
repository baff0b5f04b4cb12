"""Run the workout map web service."""
import uvicorn

from workout_map.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "workout_map.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
