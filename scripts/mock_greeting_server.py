"""Serve a local greeting endpoint for manual testing.

Usage:
    python scripts/mock_greeting_server.py [--port 3000] [--delay 0] [--status 200]

Point GREETING_BASE_URL at it, e.g. ``http://127.0.0.1:3000``.
"""

import argparse
import asyncio
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("mock_greeting_server")


def create_mock_app(message: str, delay: float, status_code: int) -> FastAPI:
    app = FastAPI(title="Mock greeting server")

    @app.get("/saludo")
    async def saludo():
        if delay:
            await asyncio.sleep(delay)
        logger.info(f"Answering /saludo with HTTP {status_code}")
        if status_code != 200:
            return JSONResponse(status_code=status_code, content={"error": "mock failure"})
        return {"mensaje": message}

    return app


def main() -> None:
    parser = argparse.ArgumentParser(description="Mock greeting server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=3000)
    parser.add_argument("--message", default="¡Hola desde el servidor!")
    parser.add_argument("--delay", type=float, default=0.0, help="seconds to wait before answering")
    parser.add_argument("--status", type=int, default=200, help="HTTP status to answer with")
    args = parser.parse_args()

    uvicorn.run(
        create_mock_app(args.message, args.delay, args.status),
        host=args.host,
        port=args.port,
    )


if __name__ == "__main__":
    main()
