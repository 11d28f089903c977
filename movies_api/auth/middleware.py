"""
Authentication middleware.

This module provides:
- Route policies (public flag, required roles, admin marker)
- The route access guard (bearer token validation)
- The role guard (role-based access control)
- FastAPI dependencies applying both guards to every route
"""
import re
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple
from fastapi import Depends, Request

from movies_api.auth.jwt import TokenClaims, TokenService
from movies_api.exceptions import Unauthorized
from movies_api.users.models import Role

BEARER_PATTERN = re.compile(r"^Bearer (\S+)$")


@dataclass(frozen=True)
class RoutePolicy:
    """Access requirements declared for one endpoint."""
    public: bool = False
    roles: Optional[Tuple[Role, ...]] = None
    admin_role: Optional[Role] = None


DEFAULT_POLICY = RoutePolicy()


class RoutePolicyRegistry:
    """
    Policies keyed by endpoint function.

    Endpoints without a registered policy require an authenticated user
    with any role.
    """

    def __init__(self):
        self._policies: Dict[Callable, RoutePolicy] = {}

    def resolve(self, endpoint: Optional[Callable]) -> RoutePolicy:
        return self._policies.get(endpoint, DEFAULT_POLICY)

    def update(self, endpoint: Callable, **changes) -> Callable:
        self._policies[endpoint] = replace(self.resolve(endpoint), **changes)
        return endpoint


route_policies = RoutePolicyRegistry()


def public(endpoint: Callable) -> Callable:
    """Mark an endpoint as reachable without a token."""
    return route_policies.update(endpoint, public=True)


def roles(*required: Role) -> Callable[[Callable], Callable]:
    """Restrict an endpoint to the given roles. ADMIN always passes."""
    def decorator(endpoint: Callable) -> Callable:
        return route_policies.update(endpoint, roles=tuple(required))
    return decorator


def admin_only(role: Role = Role.ADMIN) -> Callable[[Callable], Callable]:
    """Require the user's role to equal the admin marker."""
    def decorator(endpoint: Callable) -> Callable:
        return route_policies.update(endpoint, admin_role=role)
    return decorator


class RouteAccessGuard:
    """
    Lets public routes through, otherwise requires a valid bearer token.
    """

    def __init__(self, tokens: TokenService):
        self.tokens = tokens

    @staticmethod
    def extract_token_from_header(authorization: Optional[str]) -> Optional[str]:
        """Return the token of an exact "Bearer <token>" header, else None."""
        if not authorization:
            return None
        match = BEARER_PATTERN.match(authorization)
        return match.group(1) if match else None

    def check(self, policy: RoutePolicy, authorization: Optional[str]) -> Optional[TokenClaims]:
        """
        Validate the request's bearer token.

        Args:
            policy: Policy of the target route
            authorization: Raw Authorization header

        Returns:
            Decoded claims, or None for public routes

        Raises:
            Unauthorized: If the token is missing, malformed, tampered or expired
        """
        if policy.public:
            return None

        token = self.extract_token_from_header(authorization)
        if token is None:
            raise Unauthorized()

        try:
            return self.tokens.verify(token)
        except Exception as e:
            raise Unauthorized() from e


class RoleGuard:
    """
    Role-based access decision for an authenticated request.
    """

    @staticmethod
    def check(policy: RoutePolicy, user: Optional[TokenClaims]) -> bool:
        """
        Decide whether the user's role satisfies the route policy.

        Raises:
            Unauthorized: On any denial or unexpected error
        """
        try:
            if policy.public:
                return True

            user_role = getattr(user, "role", None)
            if not user_role:
                raise Unauthorized()

            if policy.roles is None:
                if policy.admin_role is None or user_role == policy.admin_role:
                    return True
                raise Unauthorized()

            # Admins bypass explicit role lists
            if user_role == Role.ADMIN:
                return True

            if user_role not in policy.roles:
                raise Unauthorized()

            return True
        except Exception as e:
            raise Unauthorized() from e


def get_route_policy(request: Request) -> RoutePolicy:
    """Policy of the endpoint matched for this request."""
    return route_policies.resolve(request.scope.get("endpoint"))


async def authenticate(request: Request) -> Optional[TokenClaims]:
    """
    FastAPI dependency running the route access guard.

    Stores the decoded claims on request.state.user.
    """
    guard: RouteAccessGuard = request.app.state.access_guard
    user = guard.check(get_route_policy(request), request.headers.get("Authorization"))
    request.state.user = user
    return user


async def authorize(
    request: Request,
    user: Optional[TokenClaims] = Depends(authenticate)
) -> Optional[TokenClaims]:
    """FastAPI dependency running the role guard after authentication."""
    RoleGuard.check(get_route_policy(request), user)
    return user


async def get_current_user(user: Optional[TokenClaims] = Depends(authorize)) -> TokenClaims:
    """
    FastAPI dependency returning the authenticated user.

    Raises:
        Unauthorized: If the route is public and no user was authenticated
    """
    if user is None:
        raise Unauthorized()
    return user
