"""
Structured event logging for reading changes and exports.
Writes one JSON line per event with timestamp, action, resource and client.
"""
import os
import logging
import structlog
from datetime import datetime, timezone
from flask import request, has_request_context

EVENT_LOGGER_NAME = 'bptracker.events'


def setup_event_logging(app):
    """Configure structlog for JSON output and attach the event file handler."""

    log_file = app.config.get('EVENT_LOG_FILE') or 'logs/events.log'
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    event_logger = logging.getLogger(EVENT_LOGGER_NAME)
    event_logger.setLevel(logging.INFO)

    # create_app may run more than once per process (tests, CLI)
    target = os.path.abspath(log_file)
    if not any(getattr(h, 'baseFilename', None) == target for h in event_logger.handlers):
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        event_logger.addHandler(file_handler)

    app.config['EVENT_LOGGER'] = structlog.get_logger(EVENT_LOGGER_NAME)


def get_event_logger():
    """Get the event logger instance."""
    from flask import current_app
    return current_app.config.get('EVENT_LOGGER', structlog.get_logger(EVENT_LOGGER_NAME))


def log_event(action: str, resource_type: str, resource_id: str = None,
              details: dict = None):
    """
    Log a reading event.

    Args:
        action: The action performed (CREATE, READ, UPDATE, DELETE, EXPORT)
        resource_type: Type of resource touched (reading, readings_list, ...)
        resource_id: ID of the specific resource (optional)
        details: Additional details about the action (optional)
    """
    logger = get_event_logger()

    if has_request_context():
        client_ip = request.remote_addr or 'unknown'
        user_agent = request.headers.get('User-Agent', 'unknown')
    else:
        client_ip = user_agent = 'unknown'

    logger.info(
        "reading_event",
        event_time=datetime.now(timezone.utc).isoformat(),
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        client_ip=client_ip,
        user_agent=user_agent,
        details=details or {},
    )
