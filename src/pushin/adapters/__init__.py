"""Platform blocking adapters."""

from .blocking import (
    BaseBlockingAdapter,
    BlockingAdapter,
    BlockingChange,
    RecordingBlockingAdapter,
)

__all__ = [
    "BaseBlockingAdapter",
    "BlockingAdapter",
    "BlockingChange",
    "RecordingBlockingAdapter",
]
