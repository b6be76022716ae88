"""Protean Engine runner for the storefront domain.

Starts the Engine that processes events asynchronously in production:
- OutboxProcessor: polls the outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes projectors

Usage:
    python src/server.py
"""

import asyncio

from protean.server.engine import Engine


def _get_domain():
    """Import and initialize the storefront domain."""
    from storefront.domain import storefront

    storefront.init()
    return storefront


async def run():
    engine = Engine(_get_domain())
    await asyncio.gather(engine.run())


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
