"""
Media handling - upload validation, secure storage and previews.
"""

from portfolio.media.uploads import (
    UploadPipeline,
    IncomingFile,
    IMAGE_TYPES,
    VIDEO_TYPES,
    MEDIA_TYPES,
    CV_TYPES,
)
from portfolio.media.processing import generate_thumbnail, generate_video_thumbnail

__all__ = [
    "UploadPipeline",
    "IncomingFile",
    "IMAGE_TYPES",
    "VIDEO_TYPES",
    "MEDIA_TYPES",
    "CV_TYPES",
    "generate_thumbnail",
    "generate_video_thumbnail",
]
