"""Emit a few order events through the routing declared in pyproject.toml.

Run from this directory::

    python app.py

or, equivalently for a single event::

    remit order.created --data '{"id": 42}' -v
"""

import asyncio
from pathlib import Path

from loguru import logger

from remitter.config import build_emitter, load_config

logger.enable("remitter")


async def main() -> None:
    emitter = build_emitter(load_config(Path(__file__).parent / "pyproject.toml"))

    await asyncio.gather(
        emitter.emit("order.created", {"id": 42, "card": "4242 4242 4242 4242"}),
        emitter.emit("order.cancelled", {"id": 41}),
        emitter.emit("order.draft.saved", {"id": 43}),
        emitter.emit("order.created", {"id": 44, "test": True}),
    )
    await emitter.wait_idle()


if __name__ == "__main__":
    asyncio.run(main())
