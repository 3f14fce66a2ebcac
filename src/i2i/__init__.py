"""i2i - image to image format converter CLI tool."""

from i2i.converter import (
    ConversionResult,
    ConversionStatus,
    ExportFormat,
    ImageConverter,
)
from i2i.logger import (
    ConversionLog,
    LogConfig,
    LogSink,
    VerboseLevel,
)

__version__ = "0.1.0"

__all__ = [
    "ConversionLog",
    "ConversionResult",
    "ConversionStatus",
    "ExportFormat",
    "ImageConverter",
    "LogConfig",
    "LogSink",
    "VerboseLevel",
]
