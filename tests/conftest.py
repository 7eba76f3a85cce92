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
Shared fakes for the dockinfo test suite.
"""
import threading
import time

import pytest

from dockinfo.MODELS.container import NodeInfo, RawContainer
from dockinfo.PROVIDERS.base import InventoryProvider
from dockinfo.errors import NodeMetadataUnavailable, ProviderUnavailable


def _container_entry(container_id="abcdef1234567890", networks=None, labels=None,
                     ports=None, created=1700000000, **extra):
    """
    Builds a container list entry shaped like the Docker Engine API output.
    """
    entry = {
        "Id": container_id,
        "Created": created,
        "Image": "nginx:latest",
        "Status": "Up 5 minutes",
        "State": "running",
        "HostConfig": {"NetworkMode": "bridge"},
        "Labels": labels or {},
        "NetworkSettings": {
            "Networks": {name: {"IPAddress": ip} for name, ip in (networks or {}).items()}
        },
        "Ports": ports or [],
    }
    entry.update(extra)
    return entry


class FakeProvider(InventoryProvider):
    """
    In-memory inventory. Counts calls and can be told to fail.
    """
    def __init__(self, entries=None, nodes=None, delay=0.0):
        self.entries = entries or []
        self.nodes = nodes or {}
        self.delay = delay
        self.fail = False
        self.error = None
        self.closed = False
        self.failing_nodes = set()
        self.list_calls = 0
        self.node_calls = []
        self._lock = threading.Lock()

    def list_containers(self):
        with self._lock:
            self.list_calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise ProviderUnavailable("docker daemon is not reachable")
        if self.error is not None:
            raise self.error
        return [RawContainer.model_validate(e) for e in self.entries]

    def inspect_node(self, node_id):
        self.node_calls.append(node_id)
        if node_id in self.failing_nodes or node_id not in self.nodes:
            raise NodeMetadataUnavailable(node_id, "node not found")
        return NodeInfo.model_validate({"ID": node_id, "Spec": {"Labels": self.nodes[node_id]}})

    def close(self):
        self.closed = True


class FakeClock:
    """
    Manually advanced monotonic clock, in seconds.
    """
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance_ms(self, ms):
        self.now += ms / 1000.0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_entry():
    """Factory for Engine API container entries."""
    return _container_entry


@pytest.fixture
def make_provider():
    """Factory for in-memory inventory providers."""
    return FakeProvider


@pytest.fixture
def provider():
    return FakeProvider([
        _container_entry("abcdef1234567890", networks={"bridge": "10.0.0.5"}),
    ])
