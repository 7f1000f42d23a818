"""Run the API with uvicorn: python -m flotify"""

import uvicorn

from flotify.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "flotify.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
    )


if __name__ == "__main__":
    main()
