"""dealerhub_api."""

from .monitoring.logger import configure_logger

# Console logging with default settings; create_app reconfigures with the configured level
configure_logger()
