from types import SimpleNamespace

from tests.conftest import FakeSettings
from wattmeter import cli


class FakeContext:
    def __init__(self, devices):
        self._devices = devices

    def list_devices(self, subsystem=None):
        assert subsystem == "power_supply"
        return self._devices


def _device(name, kind):
    return SimpleNamespace(sys_name=name, properties={"POWER_SUPPLY_TYPE": kind})


def test_list_power_supplies_marks_candidates(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "POWER_SUPPLY_DIR", tmp_path)
    (tmp_path / "BAT1").mkdir()
    (tmp_path / "BAT1" / "status").write_text("Charging\n")
    (tmp_path / "BAT1" / "power_now").write_text("1000000\n")

    context = FakeContext([_device("AC", "Mains"), _device("BAT1", "Battery")])
    supplies = cli.list_power_supplies(context)

    assert supplies[0] == {"name": "AC", "type": "Mains", "candidate": None}
    assert supplies[1] == {
        "name": "BAT1", "type": "Battery", "candidate": 2,
        "status": "Charging", "mode": "direct",
    }


def test_overrides_take_precedence():
    settings = FakeSettings(battery=1)
    view = cli._Overrides(settings, {"battery": 3, "combine-batteries": True})
    assert view.get_int("battery") == 3
    assert view.get_boolean("combine-batteries") is True
    assert view.get_boolean("hide-na") is False
    assert view.get_int("interval") == 5


def test_watch_interval_is_at_least_one_second(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    slept = []

    def fake_sleep(seconds):
        slept.append(seconds)
        raise KeyboardInterrupt

    monkeypatch.setattr(cli.time, "sleep", fake_sleep)
    assert cli.main(["--watch", "--interval", "-1"]) == 0
    assert slept == [1]
