"""Tests for template resolution."""
import pytest

from kubegen.core.config import BUILTIN_TEMPLATE_ROOT
from kubegen.core.template_loader import (
    TemplateError,
    TemplateNotFound,
    TemplateReadFailure,
    TemplateResolver,
)


@pytest.fixture
def dirs(tmp_path):
    override = tmp_path / "deploy" / "base" / "templates"
    builtin = tmp_path / "builtin"
    override.mkdir(parents=True)
    builtin.mkdir()
    return override, builtin


class TestTemplateResolver:
    """Test override-then-builtin lookup."""

    def test_override_wins(self, dirs):
        override, builtin = dirs
        (override / "ingress-tpl.yaml").write_text("user")
        (builtin / "ingress-tpl.yaml").write_text("builtin")

        resolver = TemplateResolver(override, builtin)

        assert resolver.resolve("ingress-tpl.yaml") == "user"
        assert resolver.locate("ingress-tpl.yaml") == override / "ingress-tpl.yaml"

    def test_falls_back_to_builtin(self, dirs):
        override, builtin = dirs
        (builtin / "daemon-tpl.yaml").write_text("builtin")

        resolver = TemplateResolver(override, builtin)

        assert resolver.resolve("daemon-tpl.yaml") == "builtin"

    def test_missing_override_dir_is_fine(self, tmp_path):
        builtin = tmp_path / "builtin"
        builtin.mkdir()
        (builtin / "cronjob-tpl.yaml").write_text("cron")

        resolver = TemplateResolver(tmp_path / "nope", builtin)

        assert resolver.resolve("cronjob-tpl.yaml") == "cron"

    def test_not_found(self, dirs):
        resolver = TemplateResolver(*dirs)

        with pytest.raises(TemplateNotFound, match="missing-tpl.yaml"):
            resolver.resolve("missing-tpl.yaml")

    def test_exists(self, dirs):
        override, builtin = dirs
        (builtin / "ingress-tpl.yaml").write_text("x")
        resolver = TemplateResolver(override, builtin)

        assert resolver.exists("ingress-tpl.yaml")
        assert not resolver.exists("other.yaml")

    def test_directory_is_not_a_template(self, dirs):
        override, builtin = dirs
        (override / "ingress-tpl.yaml").mkdir()

        resolver = TemplateResolver(override, builtin)

        assert not resolver.exists("ingress-tpl.yaml")

    def test_unreadable_template(self, dirs):
        """Located but undecodable templates raise TemplateReadFailure."""
        override, builtin = dirs
        (override / "ingress-tpl.yaml").write_bytes(b"\xff\xfe\xfa broken")

        resolver = TemplateResolver(override, builtin)

        with pytest.raises(TemplateReadFailure):
            resolver.resolve("ingress-tpl.yaml")

    def test_errors_share_base_class(self):
        assert issubclass(TemplateNotFound, TemplateError)
        assert issubclass(TemplateReadFailure, TemplateError)


class TestBuiltinTemplates:
    """The shipped templates are resolvable."""

    @pytest.mark.parametrize("name", ["ingress-tpl.yaml", "daemon-tpl.yaml", "cronjob-tpl.yaml"])
    def test_builtin_template_present(self, tmp_path, name):
        resolver = TemplateResolver(tmp_path, BUILTIN_TEMPLATE_ROOT / "base" / "templates")
        assert "{{" in resolver.resolve(name)

    def test_env_overlay_present(self):
        assert (BUILTIN_TEMPLATE_ROOT / "env" / "kustomization.yaml").is_file()
        assert (BUILTIN_TEMPLATE_ROOT / "base" / "kustomization.yaml").is_file()
