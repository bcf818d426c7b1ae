"""Building blocks for a LoRa APRS iGate: radio, APRS-IS, NTP, display and task scheduling."""

__version__ = "0.1.0"