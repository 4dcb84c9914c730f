"""
Configuration manager for persisting UI and runner settings.

Saves/loads EstimatorConfig, AccountingConfig and system settings to/from JSON.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

from neckcoach import EstimatorConfig, AccountingConfig


DEFAULT_SYSTEM_CONFIG = {
    "sample_rate_hz": 10.0,
    "source": "simulate",  # "simulate" or "replay"
    "replay_path": "",
    "simulate_seed": None,
    "status_interval_sec": 1.0,
    "print_interval_sec": 2.0
}


class ConfigManager:
    """
    Manages persistence of configuration settings.

    Saves to storage/ui_config.json
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to config file (default: storage/ui_config.json)
        """
        if config_path is None:
            config_path = "storage/ui_config.json"

        self.config_path = Path(config_path)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

    def save_config(
        self,
        estimator_config: EstimatorConfig,
        accounting_config: AccountingConfig,
        system_config: Dict[str, Any]
    ):
        """
        Save configuration to JSON.

        Args:
            estimator_config: Calibration and classification settings
            accounting_config: Time accounting settings
            system_config: Runner settings (sample rate, source, etc.)
        """
        config = {
            "estimator_config": estimator_config.to_dict(),
            "accounting_config": accounting_config.to_dict(),
            "system_config": {**DEFAULT_SYSTEM_CONFIG, **system_config}
        }

        with open(self.config_path, "w") as f:
            json.dump(config, f, indent=2)

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration from JSON.

        Missing sections or keys are filled from defaults.

        Returns:
            Dictionary with estimator_config, accounting_config, system_config
        """
        defaults = self._get_default_config()
        if not self.config_path.exists():
            return defaults

        try:
            with open(self.config_path, "r") as f:
                stored = json.load(f)
        except (json.JSONDecodeError, IOError):
            return defaults

        if not isinstance(stored, dict):
            return defaults

        for section, values in defaults.items():
            if isinstance(stored.get(section), dict):
                values.update(stored[section])
        return defaults

    def build_configs(self) -> Tuple[EstimatorConfig, AccountingConfig, Dict[str, Any]]:
        """
        Load configuration as config objects.

        Invalid stored values fall back to defaults for that section.
        """
        config = self.load_config()

        try:
            estimator_config = EstimatorConfig.from_dict(config["estimator_config"])
        except (AssertionError, TypeError, ValueError) as e:
            print(f"[CONFIG] Invalid estimator config, using defaults: {e}")
            estimator_config = EstimatorConfig()

        try:
            accounting_config = AccountingConfig.from_dict(config["accounting_config"])
        except (AssertionError, TypeError, ValueError) as e:
            print(f"[CONFIG] Invalid accounting config, using defaults: {e}")
            accounting_config = AccountingConfig()

        return estimator_config, accounting_config, config["system_config"]

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "estimator_config": EstimatorConfig().to_dict(),
            "accounting_config": AccountingConfig().to_dict(),
            "system_config": dict(DEFAULT_SYSTEM_CONFIG)
        }

    def purge_config(self):
        """Delete configuration file."""
        if self.config_path.exists():
            self.config_path.unlink()
