from pathlib import Path

from unself.needle import Needle
from .messaging.bus import MessageBus

# Packaged message catalogs: unself/common/assets/needle/<lang>/*.json
_ASSETS_ROOT = Path(__file__).parent / "assets"

needle = Needle(roots=[_ASSETS_ROOT])
bus = MessageBus(needle)

__all__ = ["bus", "needle", "MessageBus"]
