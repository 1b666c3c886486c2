# file: tests/test_config_loader.py

import pytest
import json
from unittest.mock import patch, mock_open

from scopekit.utils.config_loader import CONFIG_FILENAME, ConfigLoader
from scopekit.exceptions import ConfigurationError

@pytest.fixture
def config_loader(temp_config_dir):
    """Initializes ConfigLoader with a temporary directory."""
    return ConfigLoader(temp_config_dir)

def test_config_loader_creates_directory(tmp_path):
    """Tests if the config directory is created on initialization."""
    config_dir = tmp_path / "nested" / "config"
    ConfigLoader(config_dir)
    assert config_dir.exists()
    assert config_dir.is_dir()

def test_load_all_configs_creates_defaults(config_loader, temp_config_dir):
    """Tests that default config files are created if they don't exist."""
    config_loader.load_all_configs()

    for filename in config_loader.defaults.keys():
        assert (temp_config_dir / filename).exists()

def test_default_config_values(config_loader):
    """Tests the shipped defaults for logging, injection and the orchestrator."""
    config_loader.load_all_configs()
    config = config_loader.get_config(CONFIG_FILENAME)

    assert config["logging"]["level"] == "INFO"
    assert config["injection"]["error_strategy"] == "warning"
    assert config["orchestrator"]["inject_inactive_objects"] is False
    assert config["orchestrator"]["inject_children"] is True

def test_existing_file_wins_over_defaults(config_loader, temp_config_dir):
    """Tests that an existing config file is loaded as-is."""
    with open(temp_config_dir / CONFIG_FILENAME, 'w') as f:
        json.dump({"injection": {"error_strategy": "throw"}}, f)

    config_loader.load_all_configs()

    assert config_loader.get(CONFIG_FILENAME, "injection") == {"error_strategy": "throw"}
    assert config_loader.get(CONFIG_FILENAME, "logging", "missing") == "missing"

def test_extra_json_files_are_loaded(config_loader, temp_config_dir):
    """Tests that non-default .json files in the directory are picked up."""
    with open(temp_config_dir / "extra.json", 'w') as f:
        json.dump({"key": "value"}, f)

    config_loader.load_all_configs()

    assert config_loader.get_config("extra.json") == {"key": "value"}

def test_get_config_unknown_returns_empty(config_loader):
    config_loader.load_all_configs()
    assert config_loader.get_config("nope.json") == {}

def test_save_config_writes_to_file(config_loader, temp_config_dir):
    """Tests saving a configuration to a file."""
    test_data = {"key": "value"}
    filename = "test_config.json"

    config_loader.save_config(filename, test_data)

    file_path = temp_config_dir / filename
    assert file_path.exists()
    with open(file_path, 'r') as f:
        assert json.load(f) == test_data
    assert config_loader.get_config(filename) == test_data

def test_load_config_handles_json_decode_error(config_loader, temp_config_dir):
    """Tests that a corrupt JSON file is handled gracefully."""
    filename = "corrupt_config.json"
    file_path = temp_config_dir / filename

    with open(file_path, 'w') as f:
        f.write("{'invalid_json':}")

    default_data = {"default": True}

    # Load the corrupt file
    loaded_config = config_loader._load_config(filename, default_data)

    # Should return default data
    assert loaded_config == default_data
    # Should have moved the corrupt file to a timestamped backup
    assert not file_path.exists()
    assert len(list(temp_config_dir.glob(f"{filename}.*.bak"))) == 1

def test_save_config_raises_configuration_error_on_io_error(config_loader):
    """Tests that save_config raises ConfigurationError on file write failure."""
    with patch("builtins.open", mock_open()) as mocked_file:
        mocked_file.side_effect = IOError("Disk full")

        with pytest.raises(ConfigurationError):
            config_loader.save_config("any_file.json", {"data": "any"})

def test_get_data_dir(config_loader, temp_config_dir):
    assert config_loader.get_data_dir() == temp_config_dir

def test_section_fills_in_missing_keys(config_loader, temp_config_dir):
    """Keys the file sets win; the rest come from the shipped defaults."""
    with open(temp_config_dir / CONFIG_FILENAME, 'w') as f:
        json.dump({"logging": {"level": "DEBUG"}}, f)
    config_loader.load_all_configs()

    logging_section = config_loader.section("logging")

    assert logging_section["level"] == "DEBUG"
    assert logging_section["backup_count"] == config_loader.defaults[CONFIG_FILENAME]["logging"]["backup_count"]
    assert config_loader.section("injection") == {"error_strategy": "warning"}
    # The raw accessor still reports exactly what is stored
    assert config_loader.get(CONFIG_FILENAME, "injection") is None

def test_section_that_is_not_an_object_is_ignored(config_loader, temp_config_dir, caplog):
    with open(temp_config_dir / CONFIG_FILENAME, 'w') as f:
        json.dump({"orchestrator": ["inject_children"]}, f)
    config_loader.load_all_configs()

    with caplog.at_level("WARNING"):
        assert config_loader.section("orchestrator") == {
            "inject_inactive_objects": False,
            "inject_children": True,
        }
    assert "not an object" in caplog.text

def test_section_of_unknown_file_is_empty(config_loader):
    config_loader.load_all_configs()
    assert config_loader.section("anything", filename="extra.json") == {}

def test_defaults_are_not_shared_between_loaders(tmp_path):
    first = ConfigLoader(tmp_path / "a")
    second = ConfigLoader(tmp_path / "b")

    first.defaults[CONFIG_FILENAME]["logging"]["level"] = "DEBUG"

    assert second.defaults[CONFIG_FILENAME]["logging"]["level"] == "INFO"
