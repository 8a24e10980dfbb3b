"""Tests for variant resolution and targeting."""
from storefront.services.identity import AuthenticationContext
from storefront.services.variants import TargetingContextAccessor, VariantSource


def test_targeting_context_uses_lowercased_user_name():
    accessor = TargetingContextAccessor(AuthenticationContext(claims={"sub": "1", "name": "Alice"}))

    context = accessor.get_context()

    assert context.user_id == "alice"
    assert context.groups == []
    assert accessor.get_context() is context


def test_anonymous_targeting_context_is_empty():
    context = TargetingContextAccessor(AuthenticationContext.anonymous()).get_context()

    assert context.user_id == ""


def test_user_override_wins_over_global_override():
    source = VariantSource(
        TargetingContextAccessor(AuthenticationContext(claims={"sub": "1", "name": "Alice"})),
        overrides={"model": "gpt-4o-mini", "max_tokens": "500"},
        user_overrides={"ALICE": {"model": "gpt-4o"}},
    )

    assert source.get_value("model") == "gpt-4o"
    assert source.get_value("max_tokens") == "500"


def test_default_used_when_no_override():
    source = VariantSource(overrides={}, user_overrides={})

    assert source.get_value("temperature", "1") == "1"
    assert source.get_value("temperature") is None


def test_targeting_context_follows_refreshed_user_name():
    auth_context = AuthenticationContext(claims={"sub": "1", "name": "Alice"})
    source = VariantSource(
        TargetingContextAccessor(auth_context),
        overrides={},
        user_overrides={"bob": {"model": "gpt-4o"}},
    )
    assert source.get_value("model") is None

    auth_context.refresh(AuthenticationContext(claims={"sub": "1", "name": "Bob"}, access_token="t"))

    assert source.get_value("model") == "gpt-4o"
    assert auth_context.access_token == "t"
