import os

from netsdr_client import __version__

__all__ = [
    "ENABLE_EXPORTER",
    "NETSDR_CONNECT_TIMEOUT",
    "NETSDR_CONTROL_PORT",
    "NETSDR_DATA_HOST",
    "NETSDR_DATA_PORT",
    "NETSDR_DEBUG",
    "NETSDR_HOST",
    "NETSDR_IO_TIMEOUT",
    "NETSDR_LOG_FORMAT",
    "NETSDR_LOG_HUMAN_OUTPUT",
    "NETSDR_LOG_JSON_FILE",
    "NETSDR_METRICS_PORT",
    "NETSDR_REQUEST_TIMEOUT",
    "NETSDR_SAMPLES_FILE",
    "NETSDR_SAMPLE_BITS",
    "NETSDR_SINK_QUEUE_SIZE",
    "NETSDR_SINK_SAMPLE_BITS",
    "NETSDR_VERSION",
    "YES_ANSWER",
]

YES_ANSWER = ("true", "1", "yes", "y", "t", 1, "on", "o")
NETSDR_VERSION: str = __version__


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name, "")
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name, "")
    try:
        return float(value) if value else default
    except (ValueError, TypeError):
        return default


# Device endpoints
NETSDR_HOST: str = os.environ.get("NETSDR_HOST", "127.0.0.1")
NETSDR_CONTROL_PORT: int = _env_int("NETSDR_CONTROL_PORT", 50000)
NETSDR_DATA_HOST: str = os.environ.get("NETSDR_DATA_HOST", "0.0.0.0")
NETSDR_DATA_PORT: int = _env_int("NETSDR_DATA_PORT", 60000)

# Sample sink
NETSDR_SAMPLES_FILE: str = os.environ.get("NETSDR_SAMPLES_FILE", "samples.bin")
NETSDR_SAMPLE_BITS: int = _env_int("NETSDR_SAMPLE_BITS", 16)
NETSDR_SINK_SAMPLE_BITS: int = _env_int("NETSDR_SINK_SAMPLE_BITS", 16)
NETSDR_SINK_QUEUE_SIZE: int = _env_int("NETSDR_SINK_QUEUE_SIZE", 1024)

# Timeouts (seconds)
NETSDR_REQUEST_TIMEOUT: float = _env_float("NETSDR_REQUEST_TIMEOUT", 2.0)
NETSDR_CONNECT_TIMEOUT: float = _env_float("NETSDR_CONNECT_TIMEOUT", 1.0)
NETSDR_IO_TIMEOUT: float = _env_float("NETSDR_IO_TIMEOUT", 1.5)

# Metrics exporter
ENABLE_EXPORTER: bool = os.environ.get("NETSDR_ENABLE_EXPORTER", "0").casefold() in YES_ANSWER
NETSDR_METRICS_PORT: int = _env_int("NETSDR_METRICS_PORT", 9400)

# Logging Configuration
NETSDR_DEBUG: bool = os.environ.get("NETSDR_DEBUG", "0").casefold() in YES_ANSWER
NETSDR_LOG_FORMAT: str = os.environ.get("NETSDR_LOG_FORMAT", "human")  # "json", "human", or "both"
NETSDR_LOG_JSON_FILE: str = os.environ.get("NETSDR_LOG_JSON_FILE", "")
NETSDR_LOG_HUMAN_OUTPUT: str = os.environ.get("NETSDR_LOG_HUMAN_OUTPUT", "stderr")  # "stdout", "stderr", or file path
