"""
Processing filter contract.

A processing filter is built once from its configuration and then called
with the pipeline state of every authentication request. The state is a
mutable dict that the filter changes in place.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..exceptions import ConfigurationError

# Position of a filter in the pipeline when its configuration does not say
DEFAULT_PRIORITY = 50

# Pipeline-level option read by every filter, not one of its own options
PRIORITY_OPTION = "%priority"


class ProcessingFilter(ABC):
    """
    Base class for authentication pipeline filters.

    The pipeline-level ``%priority`` option is read here. ``config`` is left
    untouched, so subclasses must skip ``PRIORITY_OPTION`` when walking it.
    """

    def __init__(self, config: Dict[str, Any], reserved: Optional[Any] = None):
        if not isinstance(config, dict):
            raise ConfigurationError("config should be an array")

        priority = config.get(PRIORITY_OPTION, DEFAULT_PRIORITY)
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise ConfigurationError("%priority should be an integer", field=PRIORITY_OPTION)
        self.priority = priority

    @abstractmethod
    def process(self, state: Dict[str, Any]) -> None:
        """Process the pipeline state of one request, in place."""
