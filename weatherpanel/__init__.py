from .config import DEFAULT_CONFIG, OverlayConfig, resolve, resolve_row
from .engine import OverlayEngine
from .model import Cell, Group, Payload, Row

__version__ = "1.0.0"
