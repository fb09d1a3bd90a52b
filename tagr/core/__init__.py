"""tagr Core - constants shared by every layer.

Import specific names from the submodule:
    from tagr.core.constants import ErrorCode, Limits, SearchMode
"""

from tagr.core import constants

__all__ = ["constants"]
