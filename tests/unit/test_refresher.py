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
Unit tests for the refresher.
"""
import pytest
from dockinfo.CACHE.refresher import Refresher
from dockinfo.errors import ProviderUnavailable

NODE_LABEL = "com.docker.swarm.node.id"


class TestRefresher:
    """Tests for Refresher."""

    def test_keys_by_short_id(self, make_provider, make_entry, clock):
        """Test that records are keyed by the 12 character short id."""
        provider = make_provider([make_entry("abcdef1234567890")])
        snapshot = Refresher(provider, clock=clock).refresh()
        assert list(snapshot.records) == ["abcdef123456"]
        assert snapshot.get("abcdef123456").id == "abcdef1234567890"
        assert snapshot.captured_at == clock.now

    def test_snapshot_is_read_only(self, provider, clock):
        """Test that a snapshot cannot be modified."""
        snapshot = Refresher(provider, clock=clock).refresh()
        with pytest.raises(TypeError):
            snapshot.records["other"] = None

    def test_node_enrichment(self, make_provider, make_entry, clock):
        """Test the node public IP scenario with a container label override."""
        provider = make_provider(
            [make_entry(labels={NODE_LABEL: "node-1", "publicIp": "1.2.3.4"})],
            nodes={"node-1": {"publicIp": "5.6.7.8"}},
        )
        record = next(iter(Refresher(provider, clock=clock).refresh()))
        assert record.public_ip == "1.2.3.4"
        assert record.label_public_ip == "1.2.3.4"
        assert record.node_public_ip == "5.6.7.8"

    def test_node_looked_up_once_per_refresh(self, make_provider, make_entry, clock):
        """Test that containers on the same node share one inspect call."""
        provider = make_provider(
            [make_entry("a" * 16, labels={NODE_LABEL: "node-1"}),
             make_entry("b" * 16, labels={NODE_LABEL: "node-1"})],
            nodes={"node-1": {"publicIp": "5.6.7.8"}},
        )
        snapshot = Refresher(provider, clock=clock).refresh()
        assert provider.node_calls == ["node-1"]
        assert all(r.public_ip == "5.6.7.8" for r in snapshot)

    def test_node_failure_is_not_fatal(self, make_provider, make_entry, clock, caplog):
        """Test that a failing node inspect only drops the enrichment."""
        provider = make_provider(
            [make_entry("a" * 16, labels={NODE_LABEL: "node-x"}, networks={"n": "10.0.0.9"})],
        )
        with caplog.at_level("WARNING"):
            snapshot = Refresher(provider, clock=clock).refresh()
        record = snapshot.get("a" * 12)
        assert record.node_public_ip is None
        assert record.public_ip is None
        assert record.ips == ("10.0.0.9",)
        assert "Couldn't get node inspect data" in caplog.text

    def test_node_without_public_ip(self, make_provider, make_entry, clock):
        """Test a node that publishes no publicIp label."""
        provider = make_provider(
            [make_entry(labels={NODE_LABEL: "node-1"})],
            nodes={"node-1": {"role": "worker"}},
        )
        record = next(iter(Refresher(provider, clock=clock).refresh()))
        assert "publicIp" not in record.to_flat()

    def test_list_failure_propagates(self, make_provider, clock):
        """Test that a failing container listing fails the refresh."""
        provider = make_provider()
        provider.fail = True
        with pytest.raises(ProviderUnavailable):
            Refresher(provider, clock=clock).refresh()
