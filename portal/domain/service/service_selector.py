"""Role-aware selection of the comment API binding."""

from collections.abc import Mapping
from typing import Optional

import logfire

from portal.domain.error import DomainError
from portal.domain.gateway import CommentApi
from portal.domain.value import ActorType, SessionContext

from .base import Service


class ServiceSelector(Service):
    """Resolves which role-scoped comment API a call should go through."""

    def __init__(self, bindings: Mapping[ActorType, CommentApi]) -> None:
        """Initialize service selector.

        Args:
            bindings: Comment API binding per actor role
        """
        self.bindings = dict(bindings)

    def resolve_role(
        self, role_hint: Optional[ActorType], session: SessionContext
    ) -> ActorType:
        """Pick the acting role.

        Order of precedence:
        1. An explicit role hint
        2. The page being viewed, if that role has a session
        3. A student session
        4. Admin as the last resort
        """
        if role_hint is not None:
            return role_hint
        if session.on_admin_page and session.has_admin_session:
            return ActorType.ADMIN
        if session.on_student_page and session.has_student_session:
            return ActorType.STUDENT
        if session.has_student_session:
            return ActorType.STUDENT
        return ActorType.ADMIN

    def resolve_binding(
        self, role_hint: Optional[ActorType], session: SessionContext
    ) -> CommentApi:
        """Resolve the comment API binding for a call.

        Args:
            role_hint: Explicit role, if the caller knows it
            session: Current session context

        Returns:
            Binding scoped to the resolved role

        Raises:
            DomainError: If no binding is configured for the role
        """
        role = self.resolve_role(role_hint, session)
        binding = self.bindings.get(role)
        if binding is None:
            logfire.error("No comment API binding for role", role=role.value)
            raise DomainError(f"No comment API binding configured for {role.value}")
        logfire.debug(
            "Comment API binding resolved",
            role=role.value,
            explicit=role_hint is not None,
            path=session.path,
        )
        return binding
