"""NetSDR receiver control and IQ streaming client."""

__version__ = "0.1.0"
