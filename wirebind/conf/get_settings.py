# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
from typing import NamedTuple, Optional

from structlog import get_logger

from wirebind.conf.settings import WirebindSettings

logger = get_logger()

CONFIG_YAML_ENV_VAR = 'WIREBIND_CONFIG_YAML'


class _SettingsMetadata(NamedTuple):
    source: Optional[str]
    settings: WirebindSettings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> WirebindSettings:
    """ Returns the process-wide settings.

    They are loaded from the yaml filepath in the 'WIREBIND_CONFIG_YAML' env var, or are the defaults if it is not set.
    """
    global _settings_singleton
    source = os.environ.get(CONFIG_YAML_ENV_VAR)

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different file')
        return _settings_singleton.settings

    if source is None:
        settings = WirebindSettings()
    else:
        log = logger.new()
        log.debug('loading settings', source=source)
        settings = WirebindSettings.from_yaml(filepath=source)

    _settings_singleton = _SettingsMetadata(source=source, settings=settings)
    return settings


def reset_global_settings() -> None:
    """Forget the loaded settings, only meant to be used by tests."""
    global _settings_singleton
    _settings_singleton = None
