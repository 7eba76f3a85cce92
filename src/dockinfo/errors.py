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
Exceptions raised by the metadata cache, its providers and lookups.
"""


class DockInfoError(Exception):
    """Base class for all dockinfo errors."""


class ProviderUnavailable(DockInfoError):
    """The container inventory could not be listed."""


class NodeMetadataUnavailable(DockInfoError):
    """A swarm node could not be inspected."""

    def __init__(self, node_id: str, reason: str = ""):
        self.node_id = node_id
        message = f"Couldn't inspect node {node_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ContainerNotFound(DockInfoError):
    """No container in the current snapshot matches the query."""


class AddressUnresolvable(DockInfoError):
    """The caller's network address could not be determined."""


class ConfigError(DockInfoError):
    """Settings could not be loaded or are invalid."""
