"""Variant resolution for per-deployment and per-user configuration overrides."""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from storefront.analytics.logger import logger
from storefront.services.identity import AuthenticationContext
from storefront.utils.config import settings


@dataclass
class TargetingContext:
    """Who a variant lookup is for."""

    user_id: str = ""
    groups: List[str] = field(default_factory=list)


class TargetingContextAccessor:
    """Build the targeting context from the signed-in user, cached until the user name changes."""

    def __init__(self, auth_context: AuthenticationContext):
        self.auth_context = auth_context
        self._cached: Optional[TargetingContext] = None

    def get_context(self) -> TargetingContext:
        username = (self.auth_context.get_user_name() or "").lower()
        if self._cached is None or self._cached.user_id != username:
            self._cached = TargetingContext(user_id=username, groups=[])
        return self._cached


class VariantSource:
    """Key -> string lookup: per-user override, then global override, then default."""

    def __init__(
        self,
        targeting: Optional[TargetingContextAccessor] = None,
        overrides: Optional[Mapping[str, str]] = None,
        user_overrides: Optional[Mapping[str, Mapping[str, str]]] = None,
    ):
        self.targeting = targeting
        self.overrides: Dict[str, str] = dict(
            settings.variant_overrides if overrides is None else overrides
        )
        self.user_overrides: Dict[str, Dict[str, str]] = {
            user.lower(): dict(values)
            for user, values in (
                settings.variant_user_overrides if user_overrides is None else user_overrides
            ).items()
        }

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        if self.targeting is not None:
            user_id = self.targeting.get_context().user_id
            user_values = self.user_overrides.get(user_id, {})
            if key in user_values:
                logger.debug(f"Variant {key} resolved from user override for {user_id}")
                return user_values[key]
        if key in self.overrides:
            return self.overrides[key]
        return default
