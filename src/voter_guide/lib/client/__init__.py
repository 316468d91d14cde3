"""Client library — local-first decision storage and API sync.

Public API:
    - ObservableStore: Key/value store with subscribe/snapshot semantics
    - LocalDecisionStore: Visitor decisions persisted to a local JSON file
    - VoterGuideClient: httpx-based API client with best-effort sync
    - VoterGuideClientError: Raised on failed API calls
"""

from voter_guide.lib.client.api import VoterGuideClient, VoterGuideClientError
from voter_guide.lib.client.store import LocalDecisionStore, ObservableStore, generate_visitor_id

__all__ = [
    "LocalDecisionStore",
    "ObservableStore",
    "VoterGuideClient",
    "VoterGuideClientError",
    "generate_visitor_id",
]
