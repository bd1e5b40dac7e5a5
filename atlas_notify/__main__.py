"""Run the service with uvicorn: ``python -m atlas_notify``."""
from __future__ import annotations

import logging

import uvicorn
from dotenv import load_dotenv

from atlas_notify.config import load_app_config


def main() -> None:
    load_dotenv()
    config = load_app_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("atlas_notify.main:app", host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
