"""GNSS location utilities: NMEA sentence generation, message queues, timers, configuration reading, target detection and device helpers."""

__version__ = "0.1.0"