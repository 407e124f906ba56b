"""Core layer shared by all famdocs features."""

from .exceptions import *  # noqa: F401,F403
from .exceptions import __all__  # noqa: F401
