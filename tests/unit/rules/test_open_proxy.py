"""Tests for the open proxy / Tor exit rule."""

import threading

import pytest

from geoguard.common.exceptions import ConfigurationError
from geoguard.rules.open_proxy import (
    DEFAULT_PROXY_IPS,
    OpenProxyRule,
    ReadWriteLock,
    blacklist_prefixes,
)


class TestBlacklistPrefixes:
    """Tests for blacklist entry normalisation."""

    def test_plain_address_masks_to_prefix(self):
        assert blacklist_prefixes("185.220.101.7") == ["185.220.101.0/24"]

    def test_ipv6_address_masks_to_prefix(self):
        assert blacklist_prefixes("2001:db8::dead:beef") == ["2001:db8::/64"]

    def test_narrow_network_collapses_to_prefix(self):
        """Test a /28 becomes its containing /24."""
        assert blacklist_prefixes("185.220.101.16/28") == ["185.220.101.0/24"]

    def test_exact_prefix_is_kept(self):
        assert blacklist_prefixes("192.42.116.0/24") == ["192.42.116.0/24"]

    def test_broad_network_expands(self):
        """Test a /22 expands into its four /24 prefixes."""
        assert blacklist_prefixes("10.0.0.0/22") == [
            "10.0.0.0/24",
            "10.0.1.0/24",
            "10.0.2.0/24",
            "10.0.3.0/24",
        ]

    def test_too_broad_network_is_skipped(self):
        """Test a /8 would expand to 65,536 prefixes and is dropped."""
        assert blacklist_prefixes("10.0.0.0/8") == []

    @pytest.mark.parametrize("entry", ["", "garbage", "300.1.1.1", "10.0.0.0/99"])
    def test_invalid_entries_yield_nothing(self, entry):
        assert blacklist_prefixes(entry) == []


class TestOpenProxyRule:
    """Tests for OpenProxyRule scoring and administration."""

    @pytest.fixture
    def rule(self):
        return OpenProxyRule(["185.220.101.1", "192.42.116.0/24"], risk_score=40)

    def test_listed_prefix_triggers(self, rule, make_record):
        """Test a login from a blacklisted /24 scores."""
        assert rule.score(make_record(masked_ip_prefix="185.220.101.0/24"), None) == 40

    def test_unlisted_prefix_passes(self, rule, make_record):
        assert rule.score(make_record(), None) == 0

    def test_missing_prefix_passes(self, rule, make_record):
        """Test an unparseable login address never matches."""
        assert rule.score(make_record(masked_ip_prefix=""), None) == 0

    def test_subnet_granularity(self, rule):
        """Test neighbours in the same /24 match a listed address."""
        assert rule.contains("185.220.101.200")
        assert not rule.contains("185.220.102.1")

    def test_contains_rejects_invalid(self, rule):
        assert not rule.contains("not-an-ip")

    def test_add_ip(self, rule, make_record):
        """Test a newly added address takes effect immediately."""
        added = rule.add_ip("88.230.100.99")

        assert added == 1
        assert rule.score(make_record(), None) == 40

    def test_add_existing_prefix_is_noop(self, rule):
        assert rule.add_ip("185.220.101.77") == 0
        assert len(rule) == 2

    def test_remove_ip(self, rule, make_record):
        """Test removing an address lifts its prefix."""
        removed = rule.remove_ip("185.220.101.1")

        assert removed == 1
        assert rule.score(make_record(masked_ip_prefix="185.220.101.0/24"), None) == 0

    def test_remove_unknown_is_noop(self, rule):
        assert rule.remove_ip("1.1.1.1") == 0

    def test_replace_all(self, rule):
        """Test a full swap discards the old list."""
        rule.replace_all(["1.1.1.1"])

        assert len(rule) == 1
        assert rule.contains("1.1.1.1")
        assert not rule.contains("185.220.101.1")

    def test_default_rule(self):
        """Test the sample list loads masked."""
        rule = OpenProxyRule.default(risk_score=40)

        assert len(DEFAULT_PROXY_IPS) == 3
        assert rule.contains("185.220.101.1")
        assert rule.contains("185.220.102.1")

    def test_description(self, rule):
        assert rule.name == "Known Proxy/Tor Detection"
        assert rule.description.endswith(".")


class TestOpenProxyRuleFile:
    """Tests for loading blacklists from disk."""

    @pytest.fixture
    def blacklist_file(self, tmp_path):
        path = tmp_path / "ipsum.txt"
        path.write_text(
            "# IPsum threat intelligence feed\n"
            "#\n"
            "\n"
            "185.220.101.1\t8\n"
            "185.220.101.2\t7\n"
            "45.155.205.233   3\n"
            "  192.42.116.0/24  \n"
            "2001:67c:e60:c0c::192\n"
        )
        return path

    def test_from_file(self, blacklist_file):
        """Test comments and counts are ignored and entries are masked."""
        rule = OpenProxyRule.from_file(blacklist_file, risk_score=45)

        assert rule.risk_score == 45
        assert len(rule) == 4
        assert rule.contains("45.155.205.1")
        assert rule.contains("192.42.116.9")
        assert rule.contains("2001:67c:e60:c0c::1")

    def test_missing_file_raises_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            OpenProxyRule.from_file(tmp_path / "missing.txt", risk_score=45)

        assert exc_info.value.code == "CONFIG_ERROR"

    def test_reload(self, blacklist_file, tmp_path):
        """Test reload swaps in the new file's contents."""
        rule = OpenProxyRule.from_file(blacklist_file, risk_score=45)
        updated = tmp_path / "updated.txt"
        updated.write_text("8.8.8.8\n")

        rule.reload(updated)

        assert len(rule) == 1
        assert rule.contains("8.8.8.8")
        assert not rule.contains("185.220.101.1")

    def test_reload_failure_keeps_old_list(self, blacklist_file, tmp_path):
        rule = OpenProxyRule.from_file(blacklist_file, risk_score=45)

        with pytest.raises(ConfigurationError):
            rule.reload(tmp_path / "missing.txt")

        assert len(rule) == 4


class TestConcurrency:
    """Tests for concurrent lookups and updates."""

    def test_lookups_during_updates(self, make_record):
        """Test readers and writers interleave without errors."""
        rule = OpenProxyRule(["185.220.101.1"], risk_score=40)
        listed = make_record(masked_ip_prefix="185.220.101.0/24")
        errors = []
        scores = []

        def reader():
            try:
                for _ in range(200):
                    scores.append(rule.score(listed, None))
            except Exception as e:
                errors.append(e)

        def writer(offset):
            try:
                for i in range(50):
                    rule.add_ip(f"10.{offset}.{i}.1")
                    rule.remove_ip(f"10.{offset}.{i}.1")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        threads += [threading.Thread(target=writer, args=(n,)) for n in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert not errors
        assert all(score == 40 for score in scores)
        assert len(scores) == 800
        assert len(rule) == 1

    def test_write_lock_excludes_readers(self):
        """Test a reader waits while the write lock is held."""
        lock = ReadWriteLock()
        entered = threading.Event()

        def read():
            with lock.read():
                entered.set()

        with lock.write():
            t = threading.Thread(target=read)
            t.start()
            assert not entered.wait(timeout=0.1)

        assert entered.wait(timeout=5)
        t.join(timeout=5)

    def test_readers_share_lock(self):
        """Test two readers can hold the lock together."""
        lock = ReadWriteLock()
        second_entered = threading.Event()

        def read():
            with lock.read():
                second_entered.set()

        with lock.read():
            t = threading.Thread(target=read)
            t.start()
            assert second_entered.wait(timeout=5)

        t.join(timeout=5)
