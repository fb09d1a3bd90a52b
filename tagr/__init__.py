"""tagr: query compilation and virtual tag predicates for a file-tagging tool.

Subpackages:
    tagr.core: constants and error codes
    tagr.infrastructure: logging, layered configuration, metadata cache
    tagr.patterns: tag and file pattern compilation
    tagr.vtags: virtual tag parsing and evaluation
"""

from tagr.core.constants import TAGR_VERSION

__version__ = TAGR_VERSION

__all__ = ["__version__"]
