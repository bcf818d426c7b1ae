"""Driver for SX127x LoRa modems reached through a register transport."""

from __future__ import annotations

import time
from typing import Optional, Protocol, TextIO, Union

REG_FIFO = 0x00
REG_OP_MODE = 0x01
REG_FRF_MSB = 0x06
REG_FRF_MID = 0x07
REG_FRF_LSB = 0x08
REG_PA_CONFIG = 0x09
REG_OCP = 0x0B
REG_LNA = 0x0C
REG_FIFO_ADDR_PTR = 0x0D
REG_FIFO_TX_BASE_ADDR = 0x0E
REG_FIFO_RX_BASE_ADDR = 0x0F
REG_FIFO_RX_CURRENT_ADDR = 0x10
REG_IRQ_FLAGS = 0x12
REG_RX_NB_BYTES = 0x13
REG_PKT_SNR_VALUE = 0x19
REG_PKT_RSSI_VALUE = 0x1A
REG_RSSI_VALUE = 0x1B
REG_MODEM_CONFIG_1 = 0x1D
REG_MODEM_CONFIG_2 = 0x1E
REG_PREAMBLE_MSB = 0x20
REG_PREAMBLE_LSB = 0x21
REG_PAYLOAD_LENGTH = 0x22
REG_MODEM_CONFIG_3 = 0x26
REG_FREQ_ERROR_MSB = 0x28
REG_FREQ_ERROR_MID = 0x29
REG_FREQ_ERROR_LSB = 0x2A
REG_RSSI_WIDEBAND = 0x2C
REG_DETECTION_OPTIMIZE = 0x31
REG_INVERTIQ = 0x33
REG_DETECTION_THRESHOLD = 0x37
REG_SYNC_WORD = 0x39
REG_INVERTIQ2 = 0x3B
REG_DIO_MAPPING_1 = 0x40
REG_VERSION = 0x42
REG_PA_DAC = 0x4D

MODE_LONG_RANGE_MODE = 0x80
MODE_SLEEP = 0x00
MODE_STDBY = 0x01
MODE_TX = 0x03
MODE_RX_CONTINUOUS = 0x05
MODE_RX_SINGLE = 0x06

PA_BOOST = 0x80

IRQ_TX_DONE_MASK = 0x08
IRQ_PAYLOAD_CRC_ERROR_MASK = 0x20
IRQ_RX_DONE_MASK = 0x40

RF_MID_BAND_THRESHOLD = 525_000_000
RSSI_OFFSET_HF_PORT = 157
RSSI_OFFSET_LF_PORT = 164

MAX_PKT_LENGTH = 255
EXPECTED_VERSION = 0x12

PA_OUTPUT_RFO_PIN = 0
PA_OUTPUT_PA_BOOST_PIN = 1

_BANDWIDTHS = (7800, 10400, 15600, 20800, 31250, 41700, 62500, 125000, 250000, 500000)


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


class ModemNotFoundError(RuntimeError):
    """Raised when the modem does not report the expected chip version."""


class RegisterTransport(Protocol):
    """The bus a modem sits on: one address byte and one value byte per transfer."""

    def begin(self) -> None:
        """Reset the modem and open the bus."""

    def end(self) -> None:
        """Close the bus."""

    def transfer(self, address: int, value: int) -> int:
        """Send ``address`` then ``value``; return the byte clocked back."""


class LoRa:
    """SX127x modem in LoRa mode."""

    def __init__(self, transport: RegisterTransport, tx_timeout: Optional[float] = None) -> None:
        self._transport = transport
        self._tx_timeout = tx_timeout
        self._frequency = 0
        self._packet_index = 0
        self._implicit_header_mode = False

    @property
    def frequency(self) -> int:
        return self._frequency

    def _read_register(self, address: int) -> int:
        return self._transport.transfer(address & 0x7F, 0x00) & 0xFF

    def _write_register(self, address: int, value: int) -> None:
        self._transport.transfer((address | 0x80) & 0xFF, value & 0xFF)

    def begin(self, frequency: int) -> None:
        """Reset and configure the modem; raise ModemNotFoundError if it does not answer."""
        self._transport.begin()
        version = self._read_register(REG_VERSION)
        if version != EXPECTED_VERSION:
            raise ModemNotFoundError(f"unexpected modem version {version:#04x}")
        self.sleep()
        self.set_frequency(frequency)
        self._write_register(REG_FIFO_TX_BASE_ADDR, 0)
        self._write_register(REG_FIFO_RX_BASE_ADDR, 0)
        self._write_register(REG_LNA, self._read_register(REG_LNA) | 0x03)
        self._write_register(REG_MODEM_CONFIG_3, 0x04)
        self.set_tx_power(17)
        self.idle()

    def end(self) -> None:
        self.sleep()
        self._transport.end()

    def begin_packet(self, implicit_header: bool = False) -> bool:
        """Prepare a packet; False while a transmission is still running."""
        if self._is_transmitting():
            return False
        self.idle()
        if implicit_header:
            self._implicit_header()
        else:
            self._explicit_header()
        self._write_register(REG_FIFO_ADDR_PTR, 0)
        self._write_register(REG_PAYLOAD_LENGTH, 0)
        return True

    def end_packet(self, asynchronous: bool = False) -> None:
        """Start transmitting; unless asynchronous, wait until it is done."""
        self._write_register(REG_OP_MODE, MODE_LONG_RANGE_MODE | MODE_TX)
        if asynchronous:
            return
        deadline = None if self._tx_timeout is None else time.monotonic() + self._tx_timeout
        while not self._read_register(REG_IRQ_FLAGS) & IRQ_TX_DONE_MASK:
            if deadline is not None and time.monotonic() > deadline:
                raise TimeoutError("transmission did not finish in time")
            time.sleep(0)
        self._write_register(REG_IRQ_FLAGS, IRQ_TX_DONE_MASK)

    def _is_transmitting(self) -> bool:
        if self._read_register(REG_OP_MODE) & MODE_TX == MODE_TX:
            return True
        if self._read_register(REG_IRQ_FLAGS) & IRQ_TX_DONE_MASK:
            self._write_register(REG_IRQ_FLAGS, IRQ_TX_DONE_MASK)
        return False

    def parse_packet(self, size: int = 0) -> int:
        """Length of a newly received packet, or 0; re-arms single receive."""
        packet_length = 0
        irq_flags = self._read_register(REG_IRQ_FLAGS)

        if size > 0:
            self._implicit_header()
            self._write_register(REG_PAYLOAD_LENGTH, size & 0xFF)
        else:
            self._explicit_header()

        self._write_register(REG_IRQ_FLAGS, irq_flags)

        if irq_flags & IRQ_RX_DONE_MASK and not irq_flags & IRQ_PAYLOAD_CRC_ERROR_MASK:
            self._packet_index = 0
            if self._implicit_header_mode:
                packet_length = self._read_register(REG_PAYLOAD_LENGTH)
            else:
                packet_length = self._read_register(REG_RX_NB_BYTES)
            self._write_register(REG_FIFO_ADDR_PTR, self._read_register(REG_FIFO_RX_CURRENT_ADDR))
            self.idle()
        elif self._read_register(REG_OP_MODE) != MODE_LONG_RANGE_MODE | MODE_RX_SINGLE:
            self._write_register(REG_FIFO_ADDR_PTR, 0)
            self._write_register(REG_OP_MODE, MODE_LONG_RANGE_MODE | MODE_RX_SINGLE)

        return packet_length

    def _rssi_offset(self) -> int:
        return RSSI_OFFSET_LF_PORT if self._frequency < RF_MID_BAND_THRESHOLD else RSSI_OFFSET_HF_PORT

    def packet_rssi(self) -> int:
        return self._read_register(REG_PKT_RSSI_VALUE) - self._rssi_offset()

    def packet_snr(self) -> float:
        raw = self._read_register(REG_PKT_SNR_VALUE)
        if raw >= 0x80:
            raw -= 0x100
        return raw * 0.25

    def packet_frequency_error(self) -> int:
        """Frequency error of the last packet in Hz."""
        freq_error = self._read_register(REG_FREQ_ERROR_MSB) & 0b111
        freq_error = (freq_error << 8) + self._read_register(REG_FREQ_ERROR_MID)
        freq_error = (freq_error << 8) + self._read_register(REG_FREQ_ERROR_LSB)
        if self._read_register(REG_FREQ_ERROR_MSB) & 0b1000:
            freq_error -= 524288
        f_xtal = 32e6
        f_error = ((freq_error * (1 << 24)) / f_xtal) * (self.signal_bandwidth() / 500000.0)
        return int(f_error)

    def rssi(self) -> int:
        return self._read_register(REG_RSSI_VALUE) - self._rssi_offset()

    def write(self, data: Union[int, bytes, bytearray]) -> int:
        """Append bytes to the packet; return how many fitted."""
        payload = bytes([data & 0xFF]) if isinstance(data, int) else bytes(data)
        current_length = self._read_register(REG_PAYLOAD_LENGTH)
        size = len(payload)
        if current_length + size > MAX_PKT_LENGTH:
            size = MAX_PKT_LENGTH - current_length
        for byte in payload[:size]:
            self._write_register(REG_FIFO, byte)
        self._write_register(REG_PAYLOAD_LENGTH, current_length + size)
        return size

    def available(self) -> int:
        return self._read_register(REG_RX_NB_BYTES) - self._packet_index

    def read(self) -> Optional[int]:
        """Next byte of the received packet, or None when none is left."""
        if self.available() <= 0:
            return None
        self._packet_index += 1
        return self._read_register(REG_FIFO)

    def read_bytes(self, count: int) -> bytes:
        """Up to ``count`` bytes of the received packet."""
        out = bytearray()
        while len(out) < count:
            byte = self.read()
            if byte is None:
                break
            out.append(byte)
        return bytes(out)

    def peek(self) -> Optional[int]:
        """Next byte without consuming it, or None when none is left."""
        if self.available() <= 0:
            return None
        current_address = self._read_register(REG_FIFO_ADDR_PTR)
        value = self._read_register(REG_FIFO)
        self._write_register(REG_FIFO_ADDR_PTR, current_address)
        return value

    def flush(self) -> bool:
        """Flush the transport if it buffers anything; return whether it did."""
        transport_flush = getattr(self._transport, "flush", None)
        if callable(transport_flush):
            transport_flush()
            return True
        return False

    def receive(self, size: int = 0) -> None:
        """Enter continuous receive mode."""
        self._write_register(REG_DIO_MAPPING_1, 0x00)
        if size > 0:
            self._implicit_header()
            self._write_register(REG_PAYLOAD_LENGTH, size & 0xFF)
        else:
            self._explicit_header()
        self._write_register(REG_OP_MODE, MODE_LONG_RANGE_MODE | MODE_RX_CONTINUOUS)

    def idle(self) -> None:
        self._write_register(REG_OP_MODE, MODE_LONG_RANGE_MODE | MODE_STDBY)

    def sleep(self) -> None:
        self._write_register(REG_OP_MODE, MODE_LONG_RANGE_MODE | MODE_SLEEP)

    def set_tx_power(self, level: int, output_pin: int = PA_OUTPUT_PA_BOOST_PIN) -> None:
        if output_pin == PA_OUTPUT_RFO_PIN:
            level = min(max(level, 0), 14)
            self._write_register(REG_PA_CONFIG, 0x70 | level)
            return
        if level > 17:
            level = min(level, 20) - 3
            self._write_register(REG_PA_DAC, 0x87)
            self.set_ocp(140)
        else:
            level = max(level, 2)
            self._write_register(REG_PA_DAC, 0x84)
            self.set_ocp(100)
        self._write_register(REG_PA_CONFIG, PA_BOOST | (level - 2))

    def set_frequency(self, frequency: int) -> None:
        self._frequency = frequency
        frf = (frequency << 19) // 32_000_000
        self._write_register(REG_FRF_MSB, (frf >> 16) & 0xFF)
        self._write_register(REG_FRF_MID, (frf >> 8) & 0xFF)
        self._write_register(REG_FRF_LSB, frf & 0xFF)

    def spreading_factor(self) -> int:
        return self._read_register(REG_MODEM_CONFIG_2) >> 4

    def set_spreading_factor(self, sf: int) -> None:
        sf = min(max(sf, 6), 12)
        if sf == 6:
            self._write_register(REG_DETECTION_OPTIMIZE, 0xC5)
            self._write_register(REG_DETECTION_THRESHOLD, 0x0C)
        else:
            self._write_register(REG_DETECTION_OPTIMIZE, 0xC3)
            self._write_register(REG_DETECTION_THRESHOLD, 0x0A)
        config = (self._read_register(REG_MODEM_CONFIG_2) & 0x0F) | ((sf << 4) & 0xF0)
        self._write_register(REG_MODEM_CONFIG_2, config)
        self._set_ldo_flag()

    def signal_bandwidth(self) -> int:
        """Bandwidth in Hz, or -1 for an unknown register setting."""
        bw = self._read_register(REG_MODEM_CONFIG_1) >> 4
        return _BANDWIDTHS[bw] if bw < len(_BANDWIDTHS) else -1

    def set_signal_bandwidth(self, sbw: int) -> None:
        bw = next((i for i, limit in enumerate(_BANDWIDTHS[:-1]) if sbw <= limit), 9)
        config = (self._read_register(REG_MODEM_CONFIG_1) & 0x0F) | (bw << 4)
        self._write_register(REG_MODEM_CONFIG_1, config)
        self._set_ldo_flag()

    def _set_ldo_flag(self) -> None:
        symbol_duration = _tdiv(1000, _tdiv(self.signal_bandwidth(), 1 << self.spreading_factor()))
        config3 = self._read_register(REG_MODEM_CONFIG_3)
        if symbol_duration > 16:
            config3 |= 1 << 3
        else:
            config3 &= ~(1 << 3) & 0xFF
        self._write_register(REG_MODEM_CONFIG_3, config3)

    def set_coding_rate4(self, denominator: int) -> None:
        denominator = min(max(denominator, 5), 8)
        cr = denominator - 4
        self._write_register(REG_MODEM_CONFIG_1, (self._read_register(REG_MODEM_CONFIG_1) & 0xF1) | (cr << 1))

    def set_preamble_length(self, length: int) -> None:
        self._write_register(REG_PREAMBLE_MSB, (length >> 8) & 0xFF)
        self._write_register(REG_PREAMBLE_LSB, length & 0xFF)

    def set_sync_word(self, sw: int) -> None:
        self._write_register(REG_SYNC_WORD, sw)

    def enable_crc(self) -> None:
        self._write_register(REG_MODEM_CONFIG_2, self._read_register(REG_MODEM_CONFIG_2) | 0x04)

    def disable_crc(self) -> None:
        self._write_register(REG_MODEM_CONFIG_2, self._read_register(REG_MODEM_CONFIG_2) & 0xFB)

    def enable_invert_iq(self) -> None:
        self._write_register(REG_INVERTIQ, 0x66)
        self._write_register(REG_INVERTIQ2, 0x19)

    def disable_invert_iq(self) -> None:
        self._write_register(REG_INVERTIQ, 0x27)
        self._write_register(REG_INVERTIQ2, 0x1D)

    def set_ocp(self, ma: int) -> None:
        """Set the over current protection limit in mA."""
        ma &= 0xFF
        ocp_trim = 27
        if ma <= 120:
            ocp_trim = _tdiv(ma - 45, 5) & 0xFF
        elif ma <= 240:
            ocp_trim = _tdiv(ma + 30, 10) & 0xFF
        self._write_register(REG_OCP, 0x20 | (0x1F & ocp_trim))

    def set_gain(self, gain: int) -> None:
        """Set the LNA gain 1-6, or 0 for automatic gain control."""
        gain = min(gain & 0xFF, 6)
        self.idle()
        if gain == 0:
            self._write_register(REG_MODEM_CONFIG_3, 0x04)
        else:
            self._write_register(REG_MODEM_CONFIG_3, 0x00)
            self._write_register(REG_LNA, 0x03)
            self._write_register(REG_LNA, self._read_register(REG_LNA) | (gain << 5))

    def random(self) -> int:
        return self._read_register(REG_RSSI_WIDEBAND)

    def dump_registers(self, out: TextIO) -> None:
        for address in range(128):
            out.write(f"0x{address:X}: 0x{self._read_register(address):X}\n")

    def _explicit_header(self) -> None:
        self._implicit_header_mode = False
        self._write_register(REG_MODEM_CONFIG_1, self._read_register(REG_MODEM_CONFIG_1) & 0xFE)

    def _implicit_header(self) -> None:
        self._implicit_header_mode = True
        self._write_register(REG_MODEM_CONFIG_1, self._read_register(REG_MODEM_CONFIG_1) | 0x01)