"""NetSDR session package - orchestration and request correlation.

Public API:
- Session orchestrator (NetSdrClient)
- Pending request tracking (PendingRequest, PendingRequestSlot)
- Session state and handshake settings (SessionState, HandshakeConfig)
"""

from netsdr_client.session.orchestrator import NetSdrClient
from netsdr_client.session.pending import PendingRequestSlot
from netsdr_client.session.types import HandshakeConfig, PendingRequest, SessionState

__all__ = [
    "NetSdrClient",
    "PendingRequest",
    "PendingRequestSlot",
    "SessionState",
    "HandshakeConfig",
]
