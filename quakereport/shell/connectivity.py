"""Network connectivity probe - Imperative Shell.

Answers "is there a network path to the feed host?" before a fetch is
attempted, so the display layer can tell "no connectivity" apart from
"connected but no matching earthquakes".
"""

import logging
import socket


logger = logging.getLogger(__name__)


# Default timeout for the probe connection (seconds)
DEFAULT_TIMEOUT = 3.0


def has_network_connection(
    host: str = "earthquake.usgs.gov",
    port: int = 443,
    timeout: float = DEFAULT_TIMEOUT,
) -> bool:
    """Check whether a TCP connection to host:port can be opened.

    This function performs network I/O. It never raises.

    Args:
        host: Host to probe
        port: Port to probe
        timeout: Connection timeout in seconds

    Returns:
        True if the connection succeeded
    """
    try:
        with socket.create_connection((host, port), timeout=timeout):
            pass
    except OSError as e:
        logger.warning("No network connection to %s:%d: %s", host, port, e)
        return False

    logger.debug("Network connection to %s:%d available", host, port)
    return True
