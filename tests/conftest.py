import os

import pytest

from wirebind.conf.get_settings import CONFIG_YAML_ENV_VAR, reset_global_settings

os.environ.pop(CONFIG_YAML_ENV_VAR, None)


@pytest.fixture(autouse=True)
def _reset_settings():
    reset_global_settings()
    yield
    reset_global_settings()
