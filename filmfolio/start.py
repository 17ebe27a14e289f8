#!/usr/bin/env python3
"""
filmfolio Application Starter
Initializes the Application (persistence, services, session sweeper) then
starts the API server.
"""

import logging
import signal
import sys

import uvicorn

from filmfolio.app import application
from filmfolio.helpers.logging_helper import configure_logging

# Configure logging once for the whole process
configure_logging(getattr(logging, application.log_level, logging.INFO))


def shutdown_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    logging.info(f"Received signal {signum}, shutting down...")
    application.stop()
    sys.exit(0)


if __name__ == "__main__":
    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    logging.info("[Application] Starting filmfolio admin backend...")
    application.start()

    logging.info(
        "Effective config: data_dir=%s upload_dir=%s api=%s:%d session_ttl=%ds",
        application.data_dir,
        application.upload_dir,
        application.api_host,
        application.api_port,
        int(application.session_ttl_seconds),
    )

    try:
        uvicorn.run(
            "filmfolio.interfaces.api.api_app:api_app",
            host=application.api_host,
            port=application.api_port,
            timeout_keep_alive=90,
            log_level="info",
        )
    finally:
        logging.info("API server stopped, cleaning up...")
        application.stop()
