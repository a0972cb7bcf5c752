# tests/test_session.py
from strivio.models import Identity
from strivio.utils import routes
from strivio.utils.session import AUTHENTICATED, UNAUTHENTICATED, SessionContext


def test_protected_route_without_session_redirects(fake_store):
    ctx = SessionContext(fake_store)
    assert ctx.mount(routes.PROJECTS) == routes.LOGIN
    assert ctx.state == UNAUTHENTICATED


def test_public_route_without_session_renders(fake_store):
    ctx = SessionContext(fake_store)
    assert ctx.mount(routes.SIGNUP) is None
    assert ctx.guard(routes.LOGIN) is None
    assert ctx.guard(routes.FORGOT_PASSWORD) is None


def test_restored_session(fake_store):
    fake_store.identity = Identity(id="u1", email="a@b.com")
    ctx = SessionContext(fake_store)
    assert ctx.mount(routes.DASHBOARD) is None
    assert ctx.identity == fake_store.identity
    assert ctx.state == AUTHENTICATED


def test_route_change_does_not_refetch_session(fake_store):
    ctx = SessionContext(fake_store)
    ctx.mount(routes.LOGIN)
    ctx.mount(routes.TASKS)
    ctx.guard(routes.PROJECTS)
    assert fake_store.calls.count(("get_session",)) == 1
    assert len(fake_store.listeners) == 1


def test_fetch_failure_redirects_but_is_recorded(fake_store):
    fake_store.fail["get_session"] = "network down"
    ctx = SessionContext(fake_store)
    assert ctx.mount(routes.DASHBOARD) == routes.LOGIN
    assert ctx.last_error == "network down"


def test_follows_session_changes(fake_store):
    ctx = SessionContext(fake_store)
    ctx.mount(routes.LOGIN)
    fake_store.sign_up("a@b.com", "abcdef")
    fake_store.sign_in("a@b.com", "abcdef")
    assert ctx.identity.email == "a@b.com"
    assert ctx.guard(routes.TASKS) is None

    fake_store.sign_out()
    assert ctx.identity is None
    assert ctx.guard(routes.TASKS) == routes.LOGIN


def test_teardown_unsubscribes(fake_store):
    ctx = SessionContext(fake_store)
    ctx.mount(routes.LOGIN)
    ctx.teardown()
    assert fake_store.listeners == []
    assert not ctx.mounted

    fake_store.sign_up("a@b.com", "abcdef")
    fake_store.sign_in("a@b.com", "abcdef")
    assert ctx.identity is None
