from .base import CooldownStore, PixelStore
from .memory_store import MemoryCooldownStore, MemoryPixelStore
from .provider import CanvasStores, build_stores

__all__ = [
	"CanvasStores",
	"CooldownStore",
	"MemoryCooldownStore",
	"MemoryPixelStore",
	"PixelStore",
	"build_stores",
]
