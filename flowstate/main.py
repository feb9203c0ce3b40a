"""
Entry point — start the FlowState engine.

Usage:
    python -m flowstate.main
    uvicorn flowstate.api.app:app --host 127.0.0.1 --port 8765 --reload
"""

import logging

import uvicorn
from .config import config


def main():
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "flowstate.api.app:app",
        host=config.api_host,
        port=config.api_port,
        reload=False,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
