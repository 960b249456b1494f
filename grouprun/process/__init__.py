"""Process module - stream output from child processes under an idle timeout."""

from .idle_timer import IdleTimer
from .stream import OutputSink, stream_process

__all__ = ["IdleTimer", "OutputSink", "stream_process"]
