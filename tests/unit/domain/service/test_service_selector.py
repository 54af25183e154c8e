"""Unit tests for ServiceSelector."""

import pytest

from portal.adapter.portal_api import InMemoryCommentApi, InMemoryCommentBackend
from portal.domain.error import DomainError
from portal.domain.service import ServiceSelector
from portal.domain.value import ActorType, SessionContext


@pytest.fixture
def selector() -> ServiceSelector:
    backend = InMemoryCommentBackend()
    return ServiceSelector(
        bindings={
            ActorType.ADMIN: InMemoryCommentApi(backend, ActorType.ADMIN),
            ActorType.STUDENT: InMemoryCommentApi(backend, ActorType.STUDENT),
        }
    )


class TestResolveRole:
    """Tests for role resolution order."""

    def test_explicit_hint_wins(self, selector):
        session = SessionContext(path="/admin/dashboard", admin_principal="a")

        role = selector.resolve_role(ActorType.STUDENT, session)

        assert role == ActorType.STUDENT

    def test_admin_page_with_admin_session(self, selector):
        session = SessionContext(
            path="/admin/announcements", admin_principal="a", student_principal="s"
        )

        assert selector.resolve_role(None, session) == ActorType.ADMIN

    def test_student_page_with_student_session(self, selector):
        session = SessionContext(
            path="/student/newsfeed", admin_principal="a", student_principal="s"
        )

        assert selector.resolve_role(None, session) == ActorType.STUDENT

    def test_admin_page_without_admin_session_falls_back_to_student(self, selector):
        session = SessionContext(path="/admin", student_principal="s")

        assert selector.resolve_role(None, session) == ActorType.STUDENT

    def test_no_session_defaults_to_admin(self, selector):
        assert selector.resolve_role(None, SessionContext()) == ActorType.ADMIN

    def test_blank_principal_counts_as_no_session(self, selector):
        session = SessionContext(path="/student", student_principal="  ")

        assert selector.resolve_role(None, session) == ActorType.ADMIN


class TestResolveBinding:
    """Tests for binding lookup."""

    def test_returns_binding_for_role(self, selector):
        binding = selector.resolve_binding(ActorType.STUDENT, SessionContext())

        assert binding.actor_type == ActorType.STUDENT

    def test_missing_binding_raises(self):
        selector = ServiceSelector(bindings={})

        with pytest.raises(DomainError):
            selector.resolve_binding(None, SessionContext())
