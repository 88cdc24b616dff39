"""
Trip Lifecycle Provider
=======================
Local provider the driver and consumer apps talk to.

Run with ``uvicorn main:app`` or ``python main.py``; host, port and
reload come from ``API_HOST`` / ``API_PORT`` / ``API_RELOAD``.
"""

import uvicorn

from src.api.app import create_app
from src.config import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
