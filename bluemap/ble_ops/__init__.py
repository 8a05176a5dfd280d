"""Value conversion helpers shared by the D-Bus layer."""

from .conversion import *  # noqa: F401,F403
from .modalias import Modalias, format_modalias_info, parse_modalias  # noqa: F401
