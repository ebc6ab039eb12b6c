"""Run the API with uvicorn: ``python -m meterbill``."""

import sys

import uvicorn

from meterbill.config import missing_settings, settings


def main() -> int:
    missing = missing_settings(settings)
    if missing:
        print(
            "The .env file is not configured. Copy .env.example to .env and "
            "fill in the values listed below."
        )
        print("")
        for message in missing:
            print(message)
        return 1

    from meterbill.main import app

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
