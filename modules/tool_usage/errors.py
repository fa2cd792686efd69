"""
modules/tool_usage/errors.py
------------------------------
Exceptions raised by the network adapters under modules/tool_usage.

Adapters raise; callers that must not fail (directions strategies, the
transport advisor, the engine facade) convert these into "unavailable" or
"no_data" results.
"""


class ToolError(Exception):
    """An external tool call failed or returned an unusable payload."""

    def __init__(self, message: str, status: str = ""):
        super().__init__(message)
        self.status = status


class DirectionsError(ToolError):
    """Directions backend or Google Directions API failure."""


class PlaceDirectoryError(ToolError):
    """Place search / details lookup failure."""
