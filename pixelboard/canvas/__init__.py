from .models import CooldownRecord, Eligibility, NewPixel, Pixel, PlacementResult

__all__ = ["CooldownRecord", "Eligibility", "NewPixel", "Pixel", "PlacementResult"]
