"""Logfire cloud observability initialization and instrumentation."""

import logging

import logfire
from fastapi import FastAPI

from bookie import __version__
from bookie.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings, app: FastAPI | None = None) -> bool:
    """
    Initialize Logfire and instrument what is available.

    Call at startup, before the ledger handles any request. Repeated calls
    (one per app built) attach the logging bridge only once. Instruments:
    - Pydantic model validation (Game, Bet, request bodies)
    - the FastAPI app, when one is given
    - Python logging (bridged to Logfire)

    Returns True when Logfire was configured. Failures only warn; the ledger
    runs without observability.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="bookie",
            service_version=__version__,
        )

        logfire.instrument_pydantic()

        if app is not None:
            logfire.instrument_fastapi(app)

        root_logger = logging.getLogger()
        if not any(
            isinstance(handler, logfire.LogfireLoggingHandler)
            for handler in root_logger.handlers
        ):
            root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        return False
