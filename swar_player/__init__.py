"""House of Swar desktop player: raga playback, daily listening and instrument care."""

__version__ = "0.1.0"
