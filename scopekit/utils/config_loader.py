# file: scopekit/utils/config_loader.py

import copy
import json
import logging
import datetime
from pathlib import Path
from typing import Dict, Any, Optional
from scopekit.exceptions import ConfigurationError

CONFIG_FILENAME = "scopekit_config.json"

# Shipped settings for the main config file, one dict per section
DEFAULT_SETTINGS: Dict[str, Dict[str, Any]] = {
    "logging": {
        "level": "INFO",
        "max_bytes": 5 * 1024 * 1024,
        "backup_count": 5,
    },
    "injection": {
        # "warning" keeps going after a missing service, "throw" aborts the pass
        "error_strategy": "warning",
    },
    "orchestrator": {
        "inject_inactive_objects": False,
        "inject_children": True,
    },
}


class ConfigLoader:
    """
    Reads and writes the JSON files of one config directory.

    The main file is created from DEFAULT_SETTINGS on first load. Any other
    *.json file in the directory is loaded as-is. A file that fails to
    parse is moved aside to a timestamped .bak and its defaults are used.
    """

    def __init__(self, config_dir: Path):
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.configs: Dict[str, Any] = {}
        self.logger = logging.getLogger(self.__class__.__name__)
        self._defaults = {CONFIG_FILENAME: copy.deepcopy(DEFAULT_SETTINGS)}

    @property
    def defaults(self):
        """Default content per filename."""
        return self._defaults

    def load_all_configs(self):
        self.configs = {
            filename: self._load_config(filename, default_data)
            for filename, default_data in self._defaults.items()
        }
        extra = [p.name for p in sorted(self.config_dir.glob("*.json")) if p.name not in self.configs]
        for filename in extra:
            self.configs[filename] = self._load_config(filename, {})
        self.logger.debug(f"Loaded {len(self.configs)} config file(s) from {self.config_dir}")

    def _load_config(self, filename: str, default_data: Dict) -> Dict:
        path = self.config_dir / filename
        if not path.exists():
            return self._create_from_defaults(filename, default_data)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            self.logger.error(f"{filename} is not valid JSON ({e}). Falling back to defaults.")
            self._set_aside(path)
            return default_data
        except OSError as e:
            self.logger.error(f"Could not read {filename}: {e}")
            return default_data

    def _create_from_defaults(self, filename: str, default_data: Dict) -> Dict:
        self.logger.info(f"No {filename} in {self.config_dir}, writing defaults.")
        try:
            self.save_config(filename, default_data)
        except ConfigurationError as e:
            self.logger.error(f"Defaults for {filename} were not written: {e}")
            return {}
        return default_data

    def _set_aside(self, path: Path) -> Optional[Path]:
        """Renames an unreadable file to <name>.<timestamp>.bak."""
        stamp = datetime.datetime.now().strftime('%Y%m%d%H%M%S')
        backup = path.with_suffix(f"{path.suffix}.{stamp}.bak")
        try:
            path.rename(backup)
        except OSError as e:
            self.logger.error(f"Could not move {path.name} aside: {e}")
            return None
        self.logger.info(f"Kept the unreadable file as {backup}")
        return backup

    def get_config(self, filename: str = CONFIG_FILENAME) -> Dict:
        if filename not in self.configs:
            self.logger.warning(f"{filename} has not been loaded; using an empty config.")
        return self.configs.get(filename, {})

    def save_config(self, filename: str, data: Dict):
        self.configs[filename] = data
        try:
            with open(self.config_dir / filename, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=4)
        except OSError as e:
            self.logger.error(f"Failed to save {filename}: {e}")
            raise ConfigurationError(f"Could not write to file {filename}: {e}") from e

    def get_data_dir(self) -> Path:
        """Root for generated data such as logs."""
        return self.config_dir

    def get(self, config_name: str, key: str, default: Any = None) -> Any:
        """One top-level key of a loaded file, exactly as stored."""
        return self.get_config(config_name).get(key, default)

    def section(self, name: str, filename: str = CONFIG_FILENAME) -> Dict[str, Any]:
        """
        A section of a config file with its shipped defaults filled in.

        Keys present in the file win; keys the file leaves out come from
        the defaults, so a file that only sets "level" still gets the
        default rotation settings. A section that is not a JSON object is
        reported and ignored.
        """
        merged = dict(self._defaults.get(filename, {}).get(name, {}))
        stored = self.get_config(filename).get(name, {})
        if not isinstance(stored, dict):
            self.logger.warning(f"Section '{name}' in {filename} is not an object; using defaults.")
            return merged
        merged.update(stored)
        return merged
