from app.vision.aggregator import MultiPageAggregator, summarize_pages
from app.vision.extractor import VisionExtractor, is_ocr_supported
from app.vision.factory import VisionExtractorFactory

__all__ = [
    "MultiPageAggregator",
    "VisionExtractor",
    "VisionExtractorFactory",
    "is_ocr_supported",
    "summarize_pages",
]
