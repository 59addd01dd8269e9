"""
Tests for the recruiter route guard.
"""

import pytest

from jobportal.client.guard import GuardState, RouteGuard
from jobportal.client.store import AUTH_USER, Store

RECRUITER = {"id": "u1", "role": "recruiter", "email": "r@example.com"}
APPLICANT = {"id": "u2", "role": "applicant", "email": "a@example.com"}


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def visits():
    return []


def make_guard(store, visits):
    return RouteGuard(visits.append, store=store)


def test_recruiter_renders(store, visits):
    store.replace(AUTH_USER, RECRUITER)
    guard = make_guard(store, visits)
    assert guard.activate() == GuardState.rendered
    assert guard.should_render
    assert visits == []


def test_applicant_redirected_to_landing(store, visits):
    store.replace(AUTH_USER, APPLICANT)
    guard = make_guard(store, visits)
    assert guard.activate() == GuardState.redirected
    assert not guard.should_render
    assert guard.redirect_to == "/"
    assert visits == ["/"]


def test_missing_identity_renders_nothing_until_hydrated(store, visits):
    guard = make_guard(store, visits)
    assert guard.activate() == GuardState.checking
    assert not guard.should_render

    store.replace(AUTH_USER, RECRUITER)
    assert guard.state == GuardState.rendered
    assert visits == []


def test_hydrated_as_applicant_redirects(store, visits):
    guard = make_guard(store, visits)
    guard.activate()
    store.replace(AUTH_USER, APPLICANT)
    assert guard.state == GuardState.redirected
    assert visits == ["/"]


def test_logout_after_render_redirects_to_login(store, visits):
    store.replace(AUTH_USER, RECRUITER)
    guard = make_guard(store, visits)
    guard.activate()

    store.reset()
    assert guard.state == GuardState.redirected
    assert visits == ["/login"]


def test_redirect_happens_once(store, visits):
    store.replace(AUTH_USER, APPLICANT)
    guard = make_guard(store, visits)
    guard.activate()
    store.replace(AUTH_USER, RECRUITER)
    store.replace(AUTH_USER, None)
    assert visits == ["/"]


def test_deactivated_guard_ignores_identity_changes(store, visits):
    store.replace(AUTH_USER, RECRUITER)
    guard = make_guard(store, visits)
    guard.activate()
    guard.deactivate()

    store.replace(AUTH_USER, None)
    assert guard.state == GuardState.rendered
    assert visits == []


@pytest.mark.parametrize("identity", [
    {"id": "u3", "role": "admin"},
    {"id": "u3"},
    {"role": "recruiter"},
])
def test_unrecognised_identity_redirects_to_landing(store, visits, identity):
    guard = make_guard(store, visits)
    guard.activate()

    store.replace(AUTH_USER, identity)
    assert guard.state == GuardState.redirected
    assert visits == ["/"]
