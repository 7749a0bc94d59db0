from .exporter import breakdown_frames, export_breakdown
from .pipeline import CheckoutPipeline

__all__ = ["CheckoutPipeline", "breakdown_frames", "export_breakdown"]
