"""
Client sync layer - keeps a local, per-viewer cache of server collections.

- api: async HTTP client with typed errors
- store: process-wide slot store of immutable snapshots
- sync: fetch-on-activate hooks and the login/logout/session-check flows
- guard: recruiter route guard
"""

from jobportal.client.api import JobPortalClient
from jobportal.client.guard import GuardState, RouteGuard
from jobportal.client.store import Store, get_store
from jobportal.client.sync import SyncHook, SyncOutcome

__all__ = [
    "JobPortalClient",
    "GuardState",
    "RouteGuard",
    "Store",
    "get_store",
    "SyncHook",
    "SyncOutcome",
]
