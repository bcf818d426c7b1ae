import pytest

from lora_igate.board_finder import (
    BOARD_CONFIGS,
    TTGO_LORA32_V1,
    TTGO_LORA32_V2,
    TTGO_T_BEAM_V1_0,
    BoardFinder,
    BoardProbe,
    BoardType,
)


class FakeProbe(BoardProbe):
    def __init__(self, oled=(), modem=(), power=False):
        self.oled = set(oled)
        self.modem = set(modem)
        self.power = power
        self.activated_oled = []
        self.activated_lora = []

    def check_oled(self, config):
        return config.name in self.oled

    def check_modem(self, config):
        return config.name in self.modem

    def check_power(self, config):
        return self.power

    def activate_oled(self, config):
        self.activated_oled.append(config.name)

    def activate_lora(self, config):
        self.activated_lora.append(config.name)


def test_t_beam_v1_0_layout():
    beam = BoardFinder(BOARD_CONFIGS).get_board_config("TTGO_T_Beam_V1_0")
    assert beam is TTGO_T_BEAM_V1_0
    assert beam.type is BoardType.TTGO_T_BEAM_V1_0
    assert (beam.oled_sda, beam.oled_scl) == (21, 22)
    assert beam.oled_addr == 0x3C
    assert beam.need_check_power_chip is True
    assert beam.power_check_status is True


def test_defaults_for_power_check():
    finder = BoardFinder(BOARD_CONFIGS)
    v1 = finder.get_board_config("TTGO_LORA32_V1")
    v2 = finder.get_board_config("TTGO_LORA32_V2")
    assert v1 is TTGO_LORA32_V1
    assert v1.need_check_power_chip is False
    assert v1.power_check_status is False
    assert v2 is TTGO_LORA32_V2
    assert v2.need_check_power_chip is True


def test_finds_board_by_oled():
    probe = FakeProbe(oled={"ETH_BOARD"})
    found = BoardFinder(BOARD_CONFIGS, probe).search_board_config()
    assert found is not None and found.name == "ETH_BOARD"
    assert probe.activated_lora == []


def test_power_chip_selects_t_beam():
    probe = FakeProbe(oled={"TTGO_LORA32_V2", "TTGO_T_Beam_V1_0"}, power=True)
    found = BoardFinder(BOARD_CONFIGS, probe).search_board_config()
    assert found is TTGO_T_BEAM_V1_0
    assert probe.activated_oled == ["TTGO_T_Beam_V1_0"]


def test_missing_power_chip_selects_lora32_v2():
    probe = FakeProbe(oled={"TTGO_LORA32_V2", "TTGO_T_Beam_V1_0"}, power=False)
    found = BoardFinder(BOARD_CONFIGS, probe).search_board_config()
    assert found is TTGO_LORA32_V2
    assert probe.activated_oled == ["TTGO_LORA32_V2"]


def test_falls_back_to_modem():
    probe = FakeProbe(modem={"TRACKERD"}, power=False)
    found = BoardFinder(BOARD_CONFIGS, probe).search_board_config()
    assert found is not None and found.name == "TRACKERD"
    assert probe.activated_lora == ["TTGO_LORA32_V2", "TTGO_T_Beam_V0_7"]


def test_nothing_found_returns_none():
    probe = FakeProbe()
    assert BoardFinder(BOARD_CONFIGS, probe).search_board_config() is None


def test_search_without_probe_raises():
    with pytest.raises(RuntimeError):
        BoardFinder(BOARD_CONFIGS).search_board_config()


def test_get_board_config_by_name():
    finder = BoardFinder(BOARD_CONFIGS)
    assert finder.get_board_config("TTGO_LORA32_V1") is TTGO_LORA32_V1
    assert finder.get_board_config("UNKNOWN") is None


def test_all_board_names_unique():
    finder = BoardFinder(BOARD_CONFIGS)
    found = [finder.get_board_config(config.name) for config in BOARD_CONFIGS]
    assert found == list(BOARD_CONFIGS)
    assert all(a is b for a, b in zip(found, BOARD_CONFIGS))
    assert {config.type for config in found} == set(BoardType)