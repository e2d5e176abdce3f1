"""HTTP submodule: the singleton client and its request loggers."""

from .client import CoreClient
from .logger import CoreLogger
from .logger import FileRequestLogger
from .logger import RequestLogger

__all__ = [
    "CoreClient",
    "CoreLogger",
    "FileRequestLogger",
    "RequestLogger",
]
