"""
Entry point: resolve the server URL, build the service client, run the window.
"""

import sys

from .constants import APP_VERSION, APP_TITLE
from .config import log, safe_print, resolve_server_url
from .api import ServiceClient
from .app import NothingBoxApp


def main():
    """Primary client entry point."""
    safe_print(f"{APP_TITLE} v{APP_VERSION}")
    safe_print()

    server_url = resolve_server_url()
    log.info("Using service at %s", server_url)

    app = NothingBoxApp(ServiceClient(server_url))
    try:
        app.run()
    except KeyboardInterrupt:
        safe_print("\nStopped by user.")
    except Exception as e:
        log.error("Client crashed: %s", e, exc_info=True)
        sys.exit(1)
