"""Protean Engine runner for the starterpack domain.

Only needed when events are processed asynchronously (PROTEAN_ENV=production):
the Engine delivers StarterPackOrder events to the order history and order
board projectors.

Usage:
    python src/server.py
"""

import asyncio

from protean.server.engine import Engine


async def run():
    from starterpack.domain import starterpack

    starterpack.init()
    await Engine(starterpack).run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
