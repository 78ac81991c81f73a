import json
from pathlib import Path

_DEFAULT_CONFIG = Path(__file__).parent / "config.json"


class SimulationConfig:
    __slots__ = ("tick_interval", "pattern", "rows", "cols", "history_size")

    def __init__(self, tick_interval=0.5, pattern="blinker", rows=5, cols=5, history_size=8):
        self.tick_interval = tick_interval
        self.pattern = pattern
        self.rows = rows
        self.cols = cols
        # generations kept for still-life / oscillator detection
        self.history_size = history_size
        self._validate()

    def _validate(self):
        if self.tick_interval <= 0:
            raise ValueError(f"tick_interval must be > 0, got {self.tick_interval}")
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"board must be at least 1x1, got {self.rows}x{self.cols}")
        if self.history_size < 1:
            raise ValueError(f"history_size must be >= 1, got {self.history_size}")

    def to_dict(self):
        return {name: getattr(self, name) for name in self.__slots__}


class ServerConfig:
    __slots__ = ("host", "port")

    def __init__(self, host="127.0.0.1", port=8080):
        self.host = host
        self.port = port


class LoggingConfig:
    __slots__ = ("level", "file", "crash_file")

    def __init__(self, level="INFO", file="logs/life.log", crash_file="logs/crash.log"):
        self.level = level
        self.file = file
        self.crash_file = crash_file


class Config:
    __slots__ = ("simulation", "server", "logging")

    def __init__(self, simulation=None, server=None, logging=None):
        self.simulation = simulation or SimulationConfig()
        self.server = server or ServerConfig()
        self.logging = logging or LoggingConfig()

    @classmethod
    def from_dict(cls, d):
        return cls(
            SimulationConfig(**d.get("simulation", {})),
            ServerConfig(**d.get("server", {})),
            LoggingConfig(**d.get("logging", {})),
        )


def load_config(path=None):
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        return Config()

    with open(config_path) as file:
        return Config.from_dict(json.load(file))
