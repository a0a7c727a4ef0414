from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..canvas.cooldown import CooldownTracker
from ..canvas.gate import PlacementGate
from ..canvas.models import utcnow
from ..config.config import AppConfig
from ..storage.provider import CanvasStores, build_stores
from .realtime import PixelBroadcaster


@dataclass
class Services:
    gate: PlacementGate
    tracker: CooldownTracker
    broadcaster: PixelBroadcaster
    stores: CanvasStores


def wire_services(stores: CanvasStores, cfg: AppConfig, clock: Callable[[], datetime] = utcnow) -> Services:
    placement = cfg.placement
    tracker = CooldownTracker(stores.cooldowns, placement, clock=clock)
    broadcaster = PixelBroadcaster()
    gate = PlacementGate(stores.pixels, tracker, placement, listeners=[broadcaster.publish])
    return Services(gate=gate, tracker=tracker, broadcaster=broadcaster, stores=stores)


def build_services(cfg: AppConfig, clock: Callable[[], datetime] = utcnow) -> Services:
    return wire_services(build_stores(cfg, clock=clock), cfg, clock=clock)
