"""Entry point for the self-updater."""

import asyncio

from self_updater.server import run_server


def main() -> None:
    """Start the self-updater server."""
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
