import json

import pytest

from conftest import inet
from netinfo_agent import cli
from netinfo_agent.collectors import network
from netinfo_agent.config import AgentConfig, ConfigManager
from netinfo_agent.snapshot import InterfaceStats, NetworkSnapshot


@pytest.fixture
def config_file(tmp_path, sysfs, fake_addrs):
    sysfs.add_full_interface("eth0", base=1)
    sysfs.add_full_interface("lo", speed=None, base=50)
    fake_addrs["eth0"] = [inet("10.0.0.5")]
    fake_addrs["lo"] = [inet("127.0.0.1")]

    path = tmp_path / "config.json"
    ConfigManager(str(path)).save(AgentConfig(sysfs_root=str(sysfs.root), exclude_interfaces=["lo"]))
    return str(path)


def test_collect_json(config_file, capsys):
    assert cli.main(["collect", "--json", "--config", config_file]) == 0

    data = json.loads(capsys.readouterr().out)
    assert [i["name"] for i in data["network_ifaces"]] == ["eth0"]
    assert data["network_ifaces"][0]["speed_mbps"] == 1000


def test_collect_table(config_file, capsys):
    assert cli.main(["collect", "--config", config_file]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("INTERFACE")
    assert lines[1].split()[:3] == ["eth0", "10.0.0.5", "-"]


def test_collect_fails_when_enumeration_fails(tmp_path, monkeypatch, capsys):
    def fail():
        raise OSError("boom")

    monkeypatch.setattr(network.psutil, "net_if_addrs", fail)

    assert cli.main(["collect", "--json", "--config", str(tmp_path / "none.json")]) == 1
    data = json.loads(capsys.readouterr().out)
    assert data["network_ifaces"] == []
    assert data["diagnostics"][0]["severity"] == "error"


def test_watch_polls_count_times(config_file, capsys, monkeypatch):
    monkeypatch.setattr(cli.time, "sleep", lambda seconds: None)

    assert cli.main(["watch", "--count", "2", "--interval", "1", "--config", config_file]) == 0

    out = capsys.readouterr().out
    assert out.count("INTERFACE") == 2


def test_send_dry_run(config_file, capsys):
    assert cli.main(["send", "--dry-run", "--config", config_file]) == 0
    assert json.loads(capsys.readouterr().out)["network_ifaces"][0]["name"] == "eth0"


def test_send_without_url(config_file):
    assert cli.main(["send", "--config", config_file]) == 1


def test_send_posts_snapshot(config_file, monkeypatch):
    sent = []

    class FakeClient:
        def __init__(self, url, config):
            self.url = url

        def send(self, payload):
            sent.append((self.url, payload))
            return {"ok": True}

    monkeypatch.setattr(cli, "SnapshotClient", FakeClient)

    assert cli.main(["send", "--url", "http://collector.example", "--config", config_file]) == 0
    assert sent[0][0] == "http://collector.example"
    assert [i["name"] for i in sent[0][1]["network_ifaces"]] == ["eth0"]


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_exclusion_leaves_collected_snapshot_untouched():
    collected = NetworkSnapshot(interfaces=[InterfaceStats(name="eth0"), InterfaceStats(name="lo")])

    filtered = cli._exclude(collected, ["lo"])

    assert [s.name for s in filtered] == ["eth0"]
    assert [s.name for s in collected] == ["eth0", "lo"]
    assert filtered.collected_at == collected.collected_at
