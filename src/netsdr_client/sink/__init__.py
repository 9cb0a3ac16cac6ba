"""Sample sink package - stream frame consumer and byte sinks."""

from netsdr_client.sink.adapter import SampleSinkAdapter
from netsdr_client.sink.sample_sink import FileSampleSink, MemorySampleSink, SampleSink

__all__ = [
    "SampleSinkAdapter",
    "SampleSink",
    "FileSampleSink",
    "MemorySampleSink",
]
