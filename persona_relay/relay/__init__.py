# Relay package
# Sanitizer + bounded pipe between the upstream reader and the response writer.

from .sanitizer import clean
from .pipe import RelayPipe, DEFAULT_CAPACITY

__all__ = ["clean", "RelayPipe", "DEFAULT_CAPACITY"]
