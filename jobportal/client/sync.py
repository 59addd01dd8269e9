"""
Synchronization hooks - bind a view's lifetime to one fetch of one slot.

    hook = use_applicants(client, job_id)
    hook.activate()            # view mounted: one fetch goes out
    hook.set_dependency(other) # route param changed: old result is superseded
    hook.deactivate()          # view gone: late results are dropped

A result is committed only while the hook is still active and the fetch is
still the hook's latest one. The request itself is not aborted; it runs to
completion and then resolves to SyncOutcome.discarded. Failures are recorded
on the slot and never retried.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from jobportal.client.api import ApiError, JobPortalClient, UnauthenticatedError
from jobportal.client.store import (
    ALL_ADMIN_JOBS, ALL_APPLIED_JOBS, ALL_JOBS, AUTH_USER, COMPANIES,
    Store, applicants_slot, get_store, single_job_slot,
)

log = logging.getLogger(__name__)


class SyncOutcome(str, Enum):
    committed = "committed"
    failed = "failed"
    discarded = "discarded"


Fetch = Callable[[JobPortalClient, Any], Awaitable[Any]]
SlotFor = Callable[[Any], str]


class SyncHook:
    """One view's subscription to one server collection."""

    def __init__(
        self,
        client: JobPortalClient,
        slot_for: SlotFor,
        fetch: Fetch,
        dependency: Any = None,
        store: Optional[Store] = None,
    ) -> None:
        self._client = client
        self._slot_for = slot_for
        self._fetch = fetch
        self._dependency = dependency
        self._store = store or get_store()
        self._active = False
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def slot(self) -> str:
        return self._slot_for(self._dependency)

    @property
    def task(self) -> Optional[asyncio.Task]:
        """The most recently started fetch."""
        return self._task

    def read(self) -> Any:
        return self._store.get(self.slot)

    def error(self) -> Optional[Exception]:
        return self._store.error(self.slot)

    def activate(self) -> asyncio.Task:
        """Mount: start the fetch for the current dependency."""
        self._active = True
        return self._start()

    def set_dependency(self, value: Any) -> Optional[asyncio.Task]:
        """Refetch when the dependency changes; the previous fetch is superseded."""
        if value == self._dependency:
            return None
        self._dependency = value
        if not self._active:
            return None
        return self._start()

    def deactivate(self) -> None:
        """Unmount: whatever is still in flight will be discarded."""
        self._active = False
        self._generation += 1

    def _start(self) -> asyncio.Task:
        self._generation += 1
        self._task = asyncio.create_task(self._run(self._generation, self._dependency))
        return self._task

    def _owns(self, generation: int) -> bool:
        return self._active and generation == self._generation

    async def _run(self, generation: int, dependency: Any) -> SyncOutcome:
        slot = self._slot_for(dependency)
        try:
            payload = await self._fetch(self._client, dependency)
        except ApiError as e:
            if not self._owns(generation):
                log.debug(f"Dropped failure for {slot}: view no longer owns the fetch")
                return SyncOutcome.discarded
            log.warning(f"Fetch for {slot} failed: {e.message}")
            self._store.record_error(slot, e)
            return SyncOutcome.failed

        if not self._owns(generation):
            log.debug(f"Dropped late result for {slot}: view no longer owns the fetch")
            return SyncOutcome.discarded

        self._store.replace(slot, payload)
        return SyncOutcome.committed


# ============================================================
# NAMED HOOKS
# ============================================================

def use_all_jobs(client: JobPortalClient, keyword: Optional[str] = None, store: Optional[Store] = None) -> SyncHook:
    """Public job list; the search keyword is the dependency."""
    return SyncHook(client, lambda _: ALL_JOBS, lambda c, kw: c.get_all_jobs(kw), keyword, store)


def use_admin_jobs(client: JobPortalClient, store: Optional[Store] = None) -> SyncHook:
    return SyncHook(client, lambda _: ALL_ADMIN_JOBS, lambda c, _: c.get_admin_jobs(), store=store)


def use_companies(client: JobPortalClient, store: Optional[Store] = None) -> SyncHook:
    return SyncHook(client, lambda _: COMPANIES, lambda c, _: c.get_companies(), store=store)


def use_applied_jobs(client: JobPortalClient, store: Optional[Store] = None) -> SyncHook:
    return SyncHook(client, lambda _: ALL_APPLIED_JOBS, lambda c, _: c.get_applied_jobs(), store=store)


def use_applicants(client: JobPortalClient, job_id: str, store: Optional[Store] = None) -> SyncHook:
    """Applicants of one job; the route's job id is the dependency."""
    return SyncHook(client, applicants_slot, lambda c, jid: c.get_applicants(jid), job_id, store)


def use_single_job(client: JobPortalClient, job_id: str, store: Optional[Store] = None) -> SyncHook:
    return SyncHook(client, single_job_slot, lambda c, jid: c.get_job(jid), job_id, store)


# ============================================================
# SESSION FLOWS - the only writers of the identity slot
# ============================================================

async def login(
    client: JobPortalClient, email: str, password: str, role: str, store: Optional[Store] = None
) -> Any:
    """Log in and hydrate the identity slot. Errors are recorded and re-raised."""
    store = store or get_store()
    try:
        user = await client.login(email, password, role)
    except ApiError as e:
        store.record_error(AUTH_USER, e)
        raise
    store.replace(AUTH_USER, user)
    log.info(f"Logged in as {user['email']} ({user['role']})")
    return store.identity()


async def logout(client: JobPortalClient, store: Optional[Store] = None) -> None:
    """
    Log out, then clear identity and every viewer-specific slot.

    If the server call fails nothing local changes.
    """
    store = store or get_store()
    try:
        await client.logout()
    except ApiError as e:
        store.record_error(AUTH_USER, e)
        raise
    store.reset(keep=(ALL_JOBS,))
    store.replace(AUTH_USER, None)
    log.info("Logged out")


async def check_session(client: JobPortalClient, store: Optional[Store] = None) -> Any:
    """
    Ask the server who we are and hydrate the identity slot.

    A 401 means no session, so identity becomes None. Other failures keep
    the cached identity and are recorded on the slot.
    """
    store = store or get_store()
    try:
        user = await client.me()
    except UnauthenticatedError:
        store.replace(AUTH_USER, None)
        return None
    except ApiError as e:
        log.warning(f"Session check failed: {e.message}")
        store.record_error(AUTH_USER, e)
        return store.identity()
    store.replace(AUTH_USER, user)
    return store.identity()
