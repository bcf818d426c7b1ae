"""Known board pin layouts and detection of the board in use."""

from __future__ import annotations

import abc
import enum
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

log = logging.getLogger(__name__)


class BoardType(enum.Enum):
    HELTEC_WIFI_LORA_32_V1 = enum.auto()
    HELTEC_WIFI_LORA_32_V2 = enum.auto()
    TTGO_LORA32_V1 = enum.auto()
    TTGO_LORA32_V2 = enum.auto()
    TTGO_T_BEAM_V0_7 = enum.auto()
    TTGO_T_BEAM_V1_0 = enum.auto()
    ETH_BOARD = enum.auto()
    TRACKERD = enum.auto()


@dataclass(frozen=True)
class BoardConfig:
    """Pin assignment of one board.

    ``need_check_power_chip`` marks boards told apart by whether a power
    management chip answers; ``power_check_status`` is the expected answer.
    """

    name: str
    type: BoardType
    oled_sda: int
    oled_scl: int
    oled_addr: int
    oled_reset: int
    lora_sck: int
    lora_miso: int
    lora_mosi: int
    lora_cs: int
    lora_reset: int
    lora_irq: int
    need_check_power_chip: bool = False
    power_check_status: bool = False


class BoardProbe(abc.ABC):
    """Access to the hardware needed to recognise a board."""

    @abc.abstractmethod
    def check_oled(self, config: BoardConfig) -> bool:
        """True if a display answers on the board's display bus."""

    @abc.abstractmethod
    def check_modem(self, config: BoardConfig) -> bool:
        """True if a LoRa modem answers on the board's modem pins."""

    @abc.abstractmethod
    def check_power(self, config: BoardConfig) -> bool:
        """True if a power management chip answers."""

    @abc.abstractmethod
    def activate_oled(self, config: BoardConfig) -> None:
        """Switch on the display supply through the power chip."""

    @abc.abstractmethod
    def activate_lora(self, config: BoardConfig) -> None:
        """Switch on the modem supply through the power chip."""


class BoardFinder:
    """Searches a list of board configurations for the one present."""

    def __init__(self, board_configs: Iterable[BoardConfig], probe: Optional[BoardProbe] = None) -> None:
        self._board_configs: Tuple[BoardConfig, ...] = tuple(board_configs)
        self._probe = probe

    @property
    def board_configs(self) -> Tuple[BoardConfig, ...]:
        return self._board_configs

    def _power_matches(self, config: BoardConfig, probe: BoardProbe) -> bool:
        return probe.check_power(config) == config.power_check_status

    def search_board_config(self) -> Optional[BoardConfig]:
        """Find the board by its display, or by its modem; None if neither answers."""
        probe = self._probe
        if probe is None:
            raise RuntimeError("no board probe given")

        log.info("looking for a board config.")
        log.info("searching for OLED...")
        for config in self._board_configs:
            if config.need_check_power_chip:
                if not self._power_matches(config, probe):
                    continue
                probe.activate_oled(config)
            if probe.check_oled(config):
                log.info("found a board config: %s", config.name)
                return config

        log.info("could not find OLED, will search for the modem now...")
        for config in self._board_configs:
            if config.need_check_power_chip and self._power_matches(config, probe):
                probe.activate_lora(config)
            if probe.check_modem(config):
                log.info("found a board config: %s", config.name)
                return config

        log.error("could not find a board config!")
        return None

    def get_board_config(self, name: str) -> Optional[BoardConfig]:
        return next((c for c in self._board_configs if c.name == name), None)


TTGO_LORA32_V1 = BoardConfig("TTGO_LORA32_V1", BoardType.TTGO_LORA32_V1, 4, 15, 0x3C, 0, 5, 19, 27, 18, 14, 26)
TTGO_LORA32_V2 = BoardConfig("TTGO_LORA32_V2", BoardType.TTGO_LORA32_V2, 21, 22, 0x3C, 0, 5, 19, 27, 18, 14, 26, True)
TTGO_T_BEAM_V0_7 = BoardConfig("TTGO_T_Beam_V0_7", BoardType.TTGO_T_BEAM_V0_7, 21, 22, 0x3C, 0, 5, 19, 27, 18, 14, 26, True)
TTGO_T_BEAM_V1_0 = BoardConfig("TTGO_T_Beam_V1_0", BoardType.TTGO_T_BEAM_V1_0, 21, 22, 0x3C, 0, 5, 19, 27, 18, 14, 26, True, True)
ETH_BOARD = BoardConfig("ETH_BOARD", BoardType.ETH_BOARD, 33, 32, 0x3C, 0, 14, 2, 15, 12, 4, 36)
TRACKERD = BoardConfig("TRACKERD", BoardType.TRACKERD, 5, 4, 0x3C, 0, 18, 19, 23, 16, 14, 26)
HELTEC_WIFI_LORA_32_V1 = BoardConfig("HELTEC_WIFI_LORA_32_V1", BoardType.HELTEC_WIFI_LORA_32_V1, 4, 15, 0x3C, 16, 5, 19, 27, 18, 14, 26)
HELTEC_WIFI_LORA_32_V2 = BoardConfig("HELTEC_WIFI_LORA_32_V2", BoardType.HELTEC_WIFI_LORA_32_V2, 4, 15, 0x3C, 16, 5, 19, 27, 18, 14, 26)

BOARD_CONFIGS: Tuple[BoardConfig, ...] = (
    TTGO_LORA32_V1,
    TTGO_LORA32_V2,
    TTGO_T_BEAM_V0_7,
    TTGO_T_BEAM_V1_0,
    ETH_BOARD,
    TRACKERD,
    HELTEC_WIFI_LORA_32_V1,
    HELTEC_WIFI_LORA_32_V2,
)