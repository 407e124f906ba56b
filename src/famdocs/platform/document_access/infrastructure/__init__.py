"""Document access infrastructure.

Wire models, gateways over the transport contract, and transport
adapters.
"""

from .models import *
from .gateways import *
from .adapters import *
