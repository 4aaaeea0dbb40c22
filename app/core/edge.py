"""
Path-prefix rules evaluated before any handler runs.

This layer only sees the request path and the token's principal. It never
resolves association or event ids, so it can refuse a wrong role outright
but cannot grant access to a specific resource; the API-boundary guard in
``app.dependencies`` repeats the check with live data.
"""
import enum
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from app.core.roles import has_role
from app.models.user import UserRole


class EdgeDecision(str, enum.Enum):
    PASS = "pass"
    SIGN_IN = "sign_in"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class EdgeRule:
    """
    A protected path prefix.

    ``public`` lists paths inside the prefix that skip the rule: an entry
    ending in ``/`` or ``*`` exempts everything under it, anything else is an
    exact match.
    """
    prefix: str
    required_role: UserRole = UserRole.USER
    public: Tuple[str, ...] = field(default_factory=tuple)

    def matches(self, path: str) -> bool:
        if not _has_prefix(path, self.prefix):
            return False
        return not any(_is_exempt(path, entry) for entry in self.public)


def _has_prefix(path: str, prefix: str) -> bool:
    if prefix.endswith("/"):
        return path.startswith(prefix)
    return path == prefix or path.startswith(prefix + "/")


def _is_exempt(path: str, entry: str) -> bool:
    if entry.endswith("*"):
        return path.startswith(entry[:-1])
    if entry.endswith("/"):
        return path.startswith(entry) or path == entry.rstrip("/")
    return path == entry


# First match wins, so the more specific prefixes come first.
DEFAULT_RULES: Tuple[EdgeRule, ...] = (
    EdgeRule("/admin/association", UserRole.ASSOCIATION_ADMIN),
    EdgeRule("/admin", UserRole.PLATFORM_ADMIN),
    EdgeRule("/weaver", public=("/weaver/register", "/weaver/apply")),
    EdgeRule("/association", public=("/association/apply*",)),
    EdgeRule("/events"),
    EdgeRule("/applications"),
    EdgeRule("/messages"),
    EdgeRule("/settings"),
)


def match_rule(path: str, rules: Sequence[EdgeRule] = DEFAULT_RULES) -> Optional[EdgeRule]:
    for rule in rules:
        if rule.matches(path):
            return rule
    return None


def evaluate_path(
    path: str, principal, rules: Sequence[EdgeRule] = DEFAULT_RULES
) -> EdgeDecision:
    """
    Decide what happens to a request for ``path``.

    Args:
        path: Request path
        principal: Token-derived principal, or None when unauthenticated
        rules: Rule table, defaults to ``DEFAULT_RULES``

    Returns:
        Exactly one of PASS, SIGN_IN or UNAUTHORIZED
    """
    rule = match_rule(path, rules)
    if rule is None:
        return EdgeDecision.PASS

    if principal is None:
        return EdgeDecision.SIGN_IN

    if not has_role(principal, rule.required_role):
        return EdgeDecision.UNAUTHORIZED

    return EdgeDecision.PASS
