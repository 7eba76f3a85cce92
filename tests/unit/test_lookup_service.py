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
Unit tests for the lookup service.
"""
import pytest
from dockinfo.CACHE.refresher import Refresher
from dockinfo.CACHE.snapshot_cache import SnapshotCache
from dockinfo.SERVICES.lookup_service import LookupService
from dockinfo.errors import ContainerNotFound, ProviderUnavailable


def make_lookup(provider, clock, timeout_ms=60000):
    cache = SnapshotCache(Refresher(provider, clock=clock), timeout_ms=timeout_ms, clock=clock)
    return LookupService(cache)


class TestLookupService:
    """Tests for LookupService."""

    @pytest.mark.parametrize("key", ["abcdef1234567890", "abcdef123456"])
    def test_by_key(self, provider, clock, key):
        """Test lookup by full and short id."""
        record = make_lookup(provider, clock).by_key(key)
        flat = record.to_flat()
        assert flat["id"] == "abcdef1234567890"
        assert flat["ip:0"] == "10.0.0.5"
        assert "ip:1" not in flat

    def test_by_key_idempotent(self, provider, clock):
        """Test that repeated lookups return equal records."""
        lookup = make_lookup(provider, clock)
        assert lookup.by_key("abcdef123456") == lookup.by_key("abcdef123456")
        assert provider.list_calls == 1

    @pytest.mark.parametrize("key", ["unknown", "abcdef", ""])
    def test_by_key_not_found(self, provider, clock, key):
        """Test that absent keys raise ContainerNotFound."""
        with pytest.raises(ContainerNotFound):
            make_lookup(provider, clock).by_key(key)

    def test_by_address(self, provider, clock):
        """Test reverse lookup by interface address."""
        lookup = make_lookup(provider, clock)
        assert lookup.by_address("10.0.0.5") == lookup.by_key("abcdef1234567890")
        with pytest.raises(ContainerNotFound):
            lookup.by_address("10.0.0.6")

    def test_by_address_second_interface(self, make_provider, make_entry, clock):
        """Test a match on a later interface of a multi-homed container."""
        provider = make_provider([
            make_entry("a" * 16, networks={"front": "10.0.0.1", "back": "10.1.0.1"}),
            make_entry("b" * 16, networks={"front": "10.0.0.2"}),
        ])
        assert make_lookup(provider, clock).by_address("10.0.0.1").id == "a" * 16
        assert make_lookup(provider, clock).by_address("10.0.0.2").id == "b" * 16

    def test_by_address_ipv4_mapped(self, provider, clock):
        """Test that an IPv4-mapped IPv6 caller matches its IPv4 interface."""
        assert make_lookup(provider, clock).by_address("::ffff:10.0.0.5").id == "abcdef1234567890"

    def test_by_address_no_interfaces(self, make_provider, make_entry, clock):
        """Test that containers without interfaces never match."""
        provider = make_provider([make_entry(networks={})])
        with pytest.raises(ContainerNotFound):
            make_lookup(provider, clock).by_address("10.0.0.5")

    def test_provider_failure_is_not_not_found(self, make_provider, clock):
        """Test that a refresh failure surfaces as ProviderUnavailable."""
        provider = make_provider()
        provider.fail = True
        lookup = make_lookup(provider, clock)
        with pytest.raises(ProviderUnavailable):
            lookup.by_key("abcdef123456")
        with pytest.raises(ProviderUnavailable):
            lookup.by_address("10.0.0.5")
