"""Bind deployment records to template variables."""
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from kubegen.models.deploy import CommandInfo, GenerateConfig, RouteInfo

SERVICE_PORT = 80


def config_variables(config: GenerateConfig) -> Dict[str, Any]:
    """Template variables describing the application as a whole.

    Resource quotas come after the fixed fields and env vars come last, so a
    later key replaces an earlier one of the same name.
    """
    variables: Dict[str, Any] = {
        "APP_NAME": config.app_name,
        "IMAGE_NAME": config.image_name,
        "IMAGE_TAG": config.image_tag,
        "DOMAIN": config.domain,
        "NAMESPACE": config.namespace,
        "ENV_NAME": config.env_name,
        "APP_ENV": config.env_name,
        "REPLICAS": config.replicas,
        "SERVICE_NAME": config.service_name,
        "SERVICE_PORT": SERVICE_PORT,
    }
    variables.update(config.merged_resources())
    variables.update(config.env_vars)
    return variables


def route_variables(route: RouteInfo) -> Dict[str, Any]:
    """Template variables for one entry of the ROUTES loop."""
    return {
        "PATH": route.normalized_path,
        "PATH_TYPE": route.optimized_path_type,
        "SERVICE_NAME": route.service_name,
        "SERVICE_PORT": route.service_port,
        "METHOD": route.method,
        "HANDLER": route.handler,
    }


def command_variables(command: CommandInfo, config: GenerateConfig) -> Dict[str, Any]:
    """Template variables for a daemon or cronjob manifest."""
    resource_name = f"{config.app_name}-{command.resource_name}"

    variables: Dict[str, Any] = {
        "COMMAND_NAME": command.name,
        "DAEMON_NAME": resource_name,
        "CRONJOB_NAME": resource_name,
        "IMAGE_NAME": config.image_name,
        "IMAGE_TAG": config.image_tag,
        "APP_ENV": config.env_name,
        "REPLICAS": command.replicas,
    }
    variables.update(command.merged_resources())
    variables.update(config.env_vars)

    if command.args:
        variables["COMMAND_ARGS"] = True
        variables["ARGS"] = [{"ARG": arg} for arg in command.args]

    if command.env_vars:
        variables["ENV_VARS"] = [
            {"KEY": key, "VALUE": value} for key, value in command.env_vars.items()
        ]

    if command.is_cronjob and command.schedule is not None:
        variables["SCHEDULE"] = command.schedule

    return variables


def with_shared_scope(
    items: Iterable[Mapping[str, Any]],
    shared: Mapping[str, Any],
    keys: Sequence[str] = (),
) -> List[Dict[str, Any]]:
    """Copy outer variables into every loop item.

    Loop bodies only see their own item, so values such as APP_NAME have to
    be carried into each item explicitly. Item keys win over shared ones.

    Args:
        items: Loop items
        shared: Outer variables
        keys: Shared keys to copy (all of them when empty)
    """
    scope = {key: shared[key] for key in (keys or shared) if key in shared}
    return [{**scope, **item} for item in items]
