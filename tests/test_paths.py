"""Tests for namespace prefix resolution and path joining."""
from ssm_secrets_sync.secrets.domains.paths import join_path, resolve, strip_prefix


class TestResolve:
    """Test suite for resolve()."""

    def test_override_returned_verbatim(self):
        assert resolve("/custom/prefix", "my-api", "dev") == "/custom/prefix"

    def test_default_prefix_from_service_and_stage(self):
        assert resolve(None, "my-api", "dev") == "/my-api-dev/secrets/"

    def test_empty_override_uses_default(self):
        assert resolve("", "my-api", "prod") == "/my-api-prod/secrets/"


class TestJoinPath:
    """Test suite for join_path() and strip_prefix()."""

    def test_join_with_trailing_slash(self):
        assert join_path("/my-api-dev/secrets/", "db") == "/my-api-dev/secrets/db"

    def test_join_without_trailing_slash(self):
        assert join_path("/my-api-dev/secrets", "db") == "/my-api-dev/secrets/db"

    def test_strip_recovers_name(self):
        prefix = "/my-api-dev/secrets/"
        assert strip_prefix(prefix, join_path(prefix, "db")) == "db"

    def test_strip_keeps_nested_names(self):
        assert strip_prefix("/p/", "/p/group/db") == "group/db"

    def test_strip_leaves_foreign_paths(self):
        assert strip_prefix("/p/", "/other/db") == "/other/db"
