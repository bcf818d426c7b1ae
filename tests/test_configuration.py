import json
from dataclasses import dataclass

import pytest

from lora_igate.configuration import ConfigurationManagement


@dataclass
class Conf:
    callsign: str = "NOCALL-10"
    beacon: bool = True
    frequency: int = 433775000


class JsonConf(ConfigurationManagement):
    def _read_project_configuration(self, data, conf):
        conf.callsign = data.get("callsign", conf.callsign)
        conf.beacon = data.get("beacon", conf.beacon)
        conf.frequency = data.get("frequency", conf.frequency)

    def _write_project_configuration(self, conf):
        return {"callsign": conf.callsign, "beacon": conf.beacon, "frequency": conf.frequency}


def test_missing_file_keeps_defaults_and_writes_nothing(tmp_path):
    path = tmp_path / "is-cfg.json"
    conf = Conf()
    ConfigurationManagement.read_configuration(JsonConf(path), conf)
    assert conf == Conf()
    assert not path.exists()


def test_round_trip(tmp_path):
    path = tmp_path / "is-cfg.json"
    manager = JsonConf(path)
    ConfigurationManagement.write_configuration(
        manager, Conf(callsign="N0CALL-1", beacon=False, frequency=433900000)
    )
    loaded = Conf()
    ConfigurationManagement.read_configuration(manager, loaded)
    assert loaded == Conf(callsign="N0CALL-1", beacon=False, frequency=433900000)


def test_read_adds_new_fields_to_file(tmp_path):
    path = tmp_path / "is-cfg.json"
    path.write_text(json.dumps({"callsign": "N0CALL-2"}))
    conf = Conf()
    ConfigurationManagement.read_configuration(JsonConf(path), conf)
    assert conf.callsign == "N0CALL-2"
    stored = json.loads(path.read_text())
    assert stored == {"callsign": "N0CALL-2", "beacon": True, "frequency": 433775000}


def test_invalid_json_uses_defaults_and_rewrites(tmp_path):
    path = tmp_path / "is-cfg.json"
    path.write_text("{not json")
    conf = Conf()
    ConfigurationManagement.read_configuration(JsonConf(path), conf)
    assert conf == Conf()
    assert json.loads(path.read_text()) == {"callsign": "NOCALL-10", "beacon": True, "frequency": 433775000}


def test_non_object_json_uses_defaults(tmp_path):
    path = tmp_path / "is-cfg.json"
    path.write_text("[1, 2, 3]")
    conf = Conf()
    ConfigurationManagement.read_configuration(JsonConf(path), conf)
    assert conf == Conf()


def test_write_failure_raises(tmp_path):
    with pytest.raises(OSError):
        ConfigurationManagement.write_configuration(JsonConf(tmp_path), Conf())


def test_base_class_is_abstract(tmp_path):
    with pytest.raises(TypeError):
        ConfigurationManagement(tmp_path / "x.json")