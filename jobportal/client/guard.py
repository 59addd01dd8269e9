"""
Route guard for recruiter-only views.

The guard reads identity from the store (never the network) and asks the
access gate whether it may enter the admin area. It stays subscribed to the
identity slot while mounted, so a logout elsewhere redirects a view that
was already rendered.

    CHECKING --recruiter--> RENDERED --identity gone--> REDIRECTED (/login)
       |                        '------other role-----> REDIRECTED (/)
       '------other role------> REDIRECTED (/)
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional

from jobportal.client.store import AUTH_USER, Store, get_store
from jobportal.core.access import Action, Session, authorize
from jobportal.schemas.schemas import UserRole

log = logging.getLogger(__name__)


class GuardState(str, Enum):
    checking = "checking"
    rendered = "rendered"
    redirected = "redirected"


class RouteGuard:
    """Gate a recruiter subtree on the cached identity."""

    def __init__(
        self,
        navigate: Callable[[str], None],
        store: Optional[Store] = None,
        landing_route: str = "/",
        login_route: str = "/login",
    ) -> None:
        self._navigate = navigate
        self._store = store or get_store()
        self.landing_route = landing_route
        self.login_route = login_route
        self.state = GuardState.checking
        self.redirect_to: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def should_render(self) -> bool:
        return self.state == GuardState.rendered

    def activate(self) -> GuardState:
        self._unsubscribe = self._store.subscribe(AUTH_USER, self._evaluate)
        self._evaluate(self._store.get(AUTH_USER))
        return self.state

    def deactivate(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _evaluate(self, identity: Any) -> None:
        if self.state == GuardState.redirected:
            return

        if identity is None:
            # Not hydrated yet: render nothing. Lost after rendering: go log in.
            if self.state == GuardState.rendered:
                self._redirect(self.login_route)
            return

        try:
            session = Session(user_id=identity["id"], role=UserRole(identity["role"]))
        except (KeyError, TypeError, ValueError):
            # unknown or missing role: not a recruiter
            log.warning("Route guard got an unrecognised identity")
            self._redirect(self.landing_route)
            return

        if authorize(session, Action.access_admin).allowed:
            self.state = GuardState.rendered
        else:
            self._redirect(self.landing_route)

    def _redirect(self, route: str) -> None:
        self.state = GuardState.redirected
        self.redirect_to = route
        self.deactivate()
        log.info(f"Route guard redirecting to {route}")
        self._navigate(route)
