from __future__ import annotations

from texcheck.profiles import PlatformId, default_settings, parse_platform


def test_default_policies_exist():
    settings = default_settings()
    for p in PlatformId:
        assert settings.policies.policy_for(p).max_dimension > 0
    assert settings.enable_check


def test_platform_names():
    assert parse_platform("Android") is PlatformId.ANDROID
    assert parse_platform("HMI-Android") is PlatformId.HMI_ANDROID
    assert parse_platform("ios") is PlatformId.IOS
    assert parse_platform("Desktop") is PlatformId.DESKTOP
