"""core.config
Configuration core: load/save helpers for config.ini.

This module provides a tiny ConfigManager used by the CLI to read and persist
simple key/value matching settings. It purposely keeps a small API:
ConfigManager.load(), get(key, fallback), the typed get_* helpers, and save().
"""

import os
from configparser import ConfigParser, Error as ConfigParserError
from pathlib import Path
from typing import Optional

from .errors import InvalidConfiguration

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigManager:
    """Simple configuration manager backed by an INI file.

    Behaviour:
    - Uses a single DEFAULT section for lookups.
    - Creates the file with sensible defaults if it does not exist.
    - Defaults to a per-user config path (%APPDATA% on Windows,
      XDG_CONFIG_HOME or ~/.config on other systems) unless an explicit
      path is provided.
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        if config_path:
            self.config_path = Path(config_path)
        else:
            if os.name == "nt":
                base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
            else:
                base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
            self.config_path = base.joinpath("ScreenFind", "config.ini")

        self.config = ConfigParser()
        self.load()

    def load(self) -> None:
        """Load configuration from disk, creating defaults when needed."""
        existed = self.config_path.exists()
        if existed:
            try:
                self.config.read(self.config_path, encoding="utf-8")
            except ConfigParserError as e:
                raise InvalidConfiguration(f"{self.config_path}: {e}") from e

        defaults = {
            "log_level": "INFO",
            "assets_dir": "",
            "precision": "0.9",
            "use_gray": "True",
            "equalize": "True",
            "blur": "True",
            "template_width": "",
            "x_delta": "5",
            "y_delta": "5",
            "search_region": "",  # left,top,width,height in screen pixels
            "debug_artifacts": "False",
        }

        missing = [key for key in defaults if key not in self.config["DEFAULT"]]
        for key in missing:
            self.config["DEFAULT"][key] = defaults[key]

        if not existed or missing:
            self.save()

    def get(self, key: str, fallback=None):
        """Get a configuration value.

        Precedence is env (SF_<KEY>, then <KEY>) > config.ini > fallback.
        Empty environment values are ignored.
        """
        for ek in (f"SF_{str(key).upper()}", str(key).upper()):
            val = os.environ.get(ek)
            if val is not None and str(val) != "":
                return val
        return self.config["DEFAULT"].get(key, fallback)

    def get_float(self, key: str, fallback: Optional[float] = None) -> Optional[float]:
        raw = self.get(key)
        if raw is None or str(raw).strip() == "":
            return fallback
        try:
            return float(raw)
        except ValueError as e:
            raise InvalidConfiguration(f"{key}: expected a number, got {raw!r}") from e

    def get_int(self, key: str, fallback: Optional[int] = None) -> Optional[int]:
        raw = self.get(key)
        if raw is None or str(raw).strip() == "":
            return fallback
        try:
            return int(str(raw).strip())
        except ValueError as e:
            raise InvalidConfiguration(f"{key}: expected an integer, got {raw!r}") from e

    def get_bool(self, key: str, fallback: bool = False) -> bool:
        raw = self.get(key)
        if raw is None or str(raw).strip() == "":
            return fallback
        v = str(raw).strip().lower()
        if v in _TRUE:
            return True
        if v in _FALSE:
            return False
        raise InvalidConfiguration(f"{key}: expected a boolean, got {raw!r}")

    def save(self) -> None:
        """Persist current configuration to disk (creates parent directories)."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with self.config_path.open("w", encoding="utf-8") as fh:
            self.config.write(fh)
