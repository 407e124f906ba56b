"""Document access application layer.

Pure services (resolver, gate, upsert engine, concurrency guard) plus
the commands and queries a view uses.
"""

from .services import *
from .queries import *
from .commands import *
