"""Shared test fixtures for kubegen tests."""
import pytest

from kubegen.core.config import KubegenConfig
from kubegen.core.generator import KubernetesGenerator
from kubegen.sources import ProjectFile


@pytest.fixture(autouse=True)
def clean_kubegen_env(monkeypatch):
    """Keep KUBEGEN_* settings from the outer shell out of the tests."""
    for name in (
        "KUBEGEN_ROOT",
        "KUBEGEN_DEPLOY_DIR",
        "KUBEGEN_TEMPLATE_DIR",
        "KUBEGEN_CREATE_MISSING_HEADER",
        "KUBEGEN_ENVIRONMENTS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_data():
    """kubegen.yml contents for a small shop application."""
    return {
        'app': {
            'name': 'shop',
            'image': 'registry.example.com/shop',
            'tag': '1.4.2',
            'domain': 'shop.example.com',
            'env_vars': {'LOG_LEVEL': 'info'},
        },
        'environments': ['staging', 'production'],
        'routes': [
            {'path': '/users/{id}', 'method': 'GET', 'handler': 'UserHandler'},
            {'path': 'health/', 'method': 'get', 'handler': 'HealthHandler'},
        ],
        'commands': {
            'queue-worker': {
                'description': 'Consumes the job queue',
                'args': ['--sleep=3'],
                'env_vars': {'QUEUE': 'default'},
            },
            'daily-report': {'description': 'Builds the daily report'},
            'cleanup-cron': {'description': 'Purges stale carts'},
            'nightly-export': {'type': 'cronjob', 'schedule': '0 3 * *'},
        },
    }


@pytest.fixture
def project(project_data):
    return ProjectFile(project_data)


@pytest.fixture
def settings(tmp_path):
    return KubegenConfig(project_root=tmp_path)


@pytest.fixture
def generator(project, settings):
    return KubernetesGenerator(
        routes=project, commands=project, settings=settings, app_name=project.app_name
    )


@pytest.fixture
def config(project):
    return project.build_config("production")


@pytest.fixture
def initialized(generator):
    """Generator whose deploy tree has been seeded for production."""
    assert generator.initialize(["production"]) is True
    return generator
