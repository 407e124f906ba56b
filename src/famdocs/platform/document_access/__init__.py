"""Document access feature.

Who may do what to a family document, normalized sharing grants, and
version-guarded writes.
"""

from .core import *
from .application import *
from .infrastructure import *
from .module import DocumentAccessModule
