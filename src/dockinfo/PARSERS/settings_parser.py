# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Parser for dockinfo YAML settings files.
"""
from typing import Any, Dict, Optional
import yaml
from pydantic import ValidationError

from ..MODELS.settings import ServerSettings
from ..errors import ConfigError


class SettingsParser:
    """
    Loads ServerSettings from an optional YAML file with overrides on top.
    """
    def parse(self, config_path: Optional[str] = None,
              overrides: Optional[Dict[str, Any]] = None) -> ServerSettings:
        """
        Parses a settings file from a path.

        :param config_path: Path to a YAML file, or None for defaults only.
        :param overrides: Values that take precedence over the file (e.g. CLI options).
        :return: Validated settings.
        :raises ConfigError: If the file cannot be read or the settings are invalid.
        """
        content = ""
        if config_path:
            try:
                with open(config_path, 'r') as f:
                    content = f.read()
            except OSError as e:
                raise ConfigError(f"Couldn't read config file {config_path}: {e}") from e
        return self.parse_from_string(content, overrides)

    def parse_from_string(self, content: str,
                          overrides: Optional[Dict[str, Any]] = None) -> ServerSettings:
        """
        Parses settings from YAML content.

        Keys may use either underscores or dashes (``cache-timeout``).
        Overrides whose value is None are ignored.
        """
        try:
            data = yaml.safe_load(content) if content else None
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config must be a mapping of setting names to values")

        values = {str(k).replace('-', '_'): v for k, v in data.items()}
        for key, value in (overrides or {}).items():
            if value is not None:
                values[key] = value

        try:
            return ServerSettings(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e
