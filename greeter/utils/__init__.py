"""Utility functions for Greeter."""

from greeter.utils.helpers import (
    QueueStream,
    get_controller,
    latest_value_queue,
    put_latest,
)

__all__ = ["QueueStream", "get_controller", "latest_value_queue", "put_latest"]
