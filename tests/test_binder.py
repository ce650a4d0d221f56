"""Tests for binding records to template variables."""
from kubegen.core import binder
from kubegen.core.renderer import TemplateRenderer
from kubegen.models.deploy import CommandInfo, GenerateConfig, RouteInfo


def make_config(**overrides):
    values = {
        'app_name': 'shop',
        'image_name': 'registry.example.com/shop',
        'image_tag': '1.4.2',
        'domain': 'shop.example.com',
        'namespace': 'prod',
        'env_name': 'production',
        'replicas': 3,
    }
    values.update(overrides)
    return GenerateConfig(**values)


class TestConfigVariables:
    """Test application-wide variables."""

    def test_fixed_fields(self):
        variables = binder.config_variables(make_config())

        assert variables["APP_NAME"] == "shop"
        assert variables["IMAGE_NAME"] == "registry.example.com/shop"
        assert variables["IMAGE_TAG"] == "1.4.2"
        assert variables["DOMAIN"] == "shop.example.com"
        assert variables["NAMESPACE"] == "prod"
        assert variables["ENV_NAME"] == "production"
        assert variables["APP_ENV"] == "production"
        assert variables["REPLICAS"] == 3
        assert variables["SERVICE_NAME"] == "shop-service"
        assert variables["SERVICE_PORT"] == 80

    def test_resources_merged(self):
        variables = binder.config_variables(make_config(resources={"CPU_LIMIT": "2"}))

        assert variables["MEMORY_REQUEST"] == "64Mi"
        assert variables["CPU_LIMIT"] == "2"

    def test_env_vars_win(self):
        """Env vars are applied last and override resources and fixed fields."""
        config = make_config(
            resources={"MEMORY_LIMIT": "1Gi"},
            env_vars={"MEMORY_LIMIT": "2Gi", "DOMAIN": "override.example.com", "DEBUG": False},
        )
        variables = binder.config_variables(config)

        assert variables["MEMORY_LIMIT"] == "2Gi"
        assert variables["DOMAIN"] == "override.example.com"
        assert variables["DEBUG"] is False


class TestRouteVariables:
    """Test per-route loop items."""

    def test_parameterised_route(self):
        route = RouteInfo(path="/users/{id}", method="GET", handler="UserHandler")
        item = binder.route_variables(route)

        assert item == {
            "PATH": "/users/{id}",
            "PATH_TYPE": "Prefix",
            "SERVICE_NAME": "app-service",
            "SERVICE_PORT": 80,
            "METHOD": "GET",
            "HANDLER": "UserHandler",
        }

    def test_path_normalized(self):
        item = binder.route_variables(RouteInfo(path="api//v1/", path_type="Exact"))

        assert item["PATH"] == "/api/v1"
        assert item["PATH_TYPE"] == "Exact"

    def test_end_to_end_route_render(self):
        route = RouteInfo(path="/users/{id}", method="GET", handler="UserHandler")
        variables = {"ROUTES": [binder.route_variables(route)]}

        rendered = TemplateRenderer().render("{{#ROUTES}}{{METHOD}} {{PATH}}{{/ROUTES}}", variables)

        assert rendered == "GET /users/{id}"


class TestCommandVariables:
    """Test daemon/cronjob variables."""

    def test_basic_daemon(self):
        command = CommandInfo(name="Queue Worker", replicas=2)
        variables = binder.command_variables(command, make_config())

        assert variables["COMMAND_NAME"] == "Queue Worker"
        assert variables["DAEMON_NAME"] == "shop-queue-worker"
        assert variables["CRONJOB_NAME"] == "shop-queue-worker"
        assert variables["IMAGE_NAME"] == "registry.example.com/shop"
        assert variables["IMAGE_TAG"] == "1.4.2"
        assert variables["APP_ENV"] == "production"
        assert variables["REPLICAS"] == 2
        assert variables["MEMORY_REQUEST"] == "128Mi"
        assert "COMMAND_ARGS" not in variables
        assert "ARGS" not in variables
        assert "ENV_VARS" not in variables
        assert "SCHEDULE" not in variables

    def test_args_and_env(self):
        command = CommandInfo(
            name="sync",
            args=["--all", "--force"],
            env_vars={"QUEUE": "default", "BATCH": 50},
        )
        variables = binder.command_variables(command, make_config())

        assert variables["COMMAND_ARGS"] is True
        assert variables["ARGS"] == [{"ARG": "--all"}, {"ARG": "--force"}]
        assert variables["ENV_VARS"] == [
            {"KEY": "QUEUE", "VALUE": "default"},
            {"KEY": "BATCH", "VALUE": 50},
        ]

    def test_schedule_only_for_cronjobs(self):
        cron = CommandInfo(name="report", kind="cronjob", schedule="0 0 * * *")
        daemon = CommandInfo(name="report", schedule="0 0 * * *")

        assert binder.command_variables(cron, make_config())["SCHEDULE"] == "0 0 * * *"
        assert "SCHEDULE" not in binder.command_variables(daemon, make_config())

    def test_config_env_vars_included(self):
        config = make_config(env_vars={"LOG_LEVEL": "debug", "CPU_LIMIT": "3"})
        variables = binder.command_variables(CommandInfo(name="sync"), config)

        assert variables["LOG_LEVEL"] == "debug"
        assert variables["CPU_LIMIT"] == "3"


class TestSharedScope:
    """Test merged per-item scopes."""

    def test_selected_keys_copied(self):
        items = binder.with_shared_scope(
            [{"PATH": "/a"}, {"PATH": "/b", "APP_NAME": "mine"}],
            {"APP_NAME": "shop", "DOMAIN": "shop.example.com", "SECRET": "x"},
            ("APP_NAME", "DOMAIN", "MISSING"),
        )

        assert items == [
            {"APP_NAME": "shop", "DOMAIN": "shop.example.com", "PATH": "/a"},
            {"APP_NAME": "mine", "DOMAIN": "shop.example.com", "PATH": "/b"},
        ]

    def test_all_keys_when_unspecified(self):
        items = binder.with_shared_scope([{}], {"A": 1, "B": 2})
        assert items == [{"A": 1, "B": 2}]

    def test_loop_sees_shared_values(self):
        variables = {
            "ROUTES": binder.with_shared_scope([{"PATH": "/a"}], {"APP_NAME": "shop"}),
        }
        rendered = TemplateRenderer().render("{{#ROUTES}}{{APP_NAME}}{{PATH}}{{/ROUTES}}", variables)
        assert rendered == "shop/a"
