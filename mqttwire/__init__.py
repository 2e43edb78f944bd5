"""Encoding and decoding of MQTT v5.0 PUBLISH and acknowledgement packet bodies."""

__version__ = "0.2.0"