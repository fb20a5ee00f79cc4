"""Tests for YAML route rules and matching."""

from pathlib import Path

import pytest

from app.models.security import Role
from app.security.config import load_security_config

REPO_CONFIG = Path(__file__).resolve().parents[2] / "config" / "security_config.yaml"


@pytest.fixture
def config():
    return load_security_config(REPO_CONFIG)


def test_public_routes_need_no_auth(config):
    assert config.match("/api/v1/suggestions", "POST").auth_required is False
    assert config.match("/api/v1/suggestions", "GET").auth_required is False
    assert config.match("/api/v1/suggestions/AB12CD", "GET").auth_required is False
    assert config.match("/api/v1/suggestions/3/upvote", "post").auth_required is False
    assert config.match("/api/v1/admin/login", "POST").auth_required is False


def test_admin_suggestion_routes_need_auth_but_no_role(config):
    rule = config.match("/api/v1/admin/suggestions/3/status", "PUT")
    assert rule.auth_required is True
    assert rule.required_roles == frozenset()


def test_management_routes_need_super_admin(config):
    for path, method in [
        ("/api/v1/admin/users", "GET"),
        ("/api/v1/admin/users", "POST"),
        ("/api/v1/admin/users/5", "PUT"),
        ("/api/v1/admin/users/5", "DELETE"),
        ("/api/v1/admin/departments", "POST"),
        ("/api/v1/admin/departments/2", "DELETE"),
    ]:
        rule = config.match(path, method)
        assert rule.auth_required is True, path
        assert rule.required_roles == frozenset({Role.SUPER_ADMIN}), path


def test_unlisted_route_falls_back_to_default(config):
    rule = config.match("/api/v1/something-new", "GET")
    assert rule.auth_required is True
    assert rule.required_roles == frozenset()


def test_rate_limit_settings(config):
    assert config.rate_limit.limit == 3
    assert config.rate_limit.window_seconds == 60


def test_missing_security_key_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("other: {}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="security"):
        load_security_config(path)
