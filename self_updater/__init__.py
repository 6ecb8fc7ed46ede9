"""Self-updater service.

A small aiohttp service that pulls the latest revision of the application
checked out next to it, reinstalls dependencies, rebuilds, and streams
progress back to the caller as newline-delimited JSON.
"""

__version__ = "0.1.0"
