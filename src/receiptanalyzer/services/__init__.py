"""Receipt analyzer services."""

from .analyzer import ReceiptAnalyzer
from .vision import UpstreamReply, VisionClient

__all__ = ["ReceiptAnalyzer", "UpstreamReply", "VisionClient"]
