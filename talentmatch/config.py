"""
Configuration management for TalentMatch.

This module provides configuration management including:
- .env file support for environment variables
- Settings persistence and validation
- Default values and type checking
- CLI integration for config management
"""

import copy
import json
import os
from pathlib import Path
from typing import Dict, Any, Optional, List
from dotenv import load_dotenv, set_key, unset_key
from rich.console import Console
from rich.table import Table


class ConfigManager:
    """Manages TalentMatch configuration settings and .env files."""

    # Default configuration values
    DEFAULT_CONFIG = {
        # Encoder settings
        "embedding": {
            "dimension": 64,
            "scale": 100.0
        },

        # Matching settings
        "matching": {
            "top_k": 3,
            "score_precision": 3
        },

        # Remote matching service settings
        "remote": {
            "enabled": True,
            "base_url": "https://condidate-test-be.onrender.com",
            "timeout": 10
        },

        # Export settings
        "export": {
            "default_format": "csv",
            "output_directory": ".",
            "include_timestamps": True
        },

        # CLI settings
        "cli": {
            "default_table_limit": 50
        }
    }

    # Mapping of environment variables to config paths
    ENV_MAPPINGS = {
        "TALENTMATCH_EMBEDDING_DIMENSION": ("embedding", "dimension"),
        "TALENTMATCH_EMBEDDING_SCALE": ("embedding", "scale"),

        "TALENTMATCH_TOP_K": ("matching", "top_k"),
        "TALENTMATCH_SCORE_PRECISION": ("matching", "score_precision"),

        "TALENTMATCH_REMOTE_ENABLED": ("remote", "enabled"),
        "TALENTMATCH_REMOTE_URL": ("remote", "base_url"),
        "TALENTMATCH_REMOTE_TIMEOUT": ("remote", "timeout"),

        "TALENTMATCH_EXPORT_FORMAT": ("export", "default_format"),
        "TALENTMATCH_EXPORT_DIR": ("export", "output_directory"),
        "TALENTMATCH_EXPORT_TIMESTAMPS": ("export", "include_timestamps"),

        "TALENTMATCH_TABLE_LIMIT": ("cli", "default_table_limit")
    }

    def __init__(self, config_dir: str = "."):
        self.config_dir = Path(config_dir)
        self.env_file = self.config_dir / ".env"
        self.config_file = self.config_dir / "talentmatch.config.json"
        self.console = Console()

        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Build the effective configuration: defaults, then the JSON file, then the environment."""
        if self.env_file.exists():
            load_dotenv(str(self.env_file))

        config = copy.deepcopy(self.DEFAULT_CONFIG)
        self._merge_into(config, self._read_config_file())
        self._apply_env_overrides(config)
        return config

    def _read_config_file(self) -> Dict[str, Any]:
        if not self.config_file.exists():
            return {}
        try:
            data = json.loads(self.config_file.read_text())
        except (OSError, json.JSONDecodeError) as e:
            self.console.print(f"[yellow]Warning: Could not load config file: {e}[/yellow]")
            return {}
        if not isinstance(data, dict):
            self.console.print("[yellow]Warning: Config file must hold a JSON object, ignoring it[/yellow]")
            return {}
        return data

    @classmethod
    def _merge_into(cls, target: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively copy override's values into target, section by section."""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                cls._merge_into(target[key], value)
            else:
                target[key] = copy.deepcopy(value)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> None:
        """Apply environment variable overrides, typed by the default value."""
        for env_var, (section, key) in self.ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if value is None:
                continue

            try:
                config[section][key] = self._coerce(value, self.DEFAULT_CONFIG[section][key])
            except ValueError:
                self.console.print(f"[yellow]Warning: Invalid value for {env_var}: {value}[/yellow]")

    @staticmethod
    def _coerce(value: str, default_value: Any) -> Any:
        """Convert a string value to the type of the default value."""
        # bool first, since bool is a subclass of int
        if isinstance(default_value, bool):
            return value.lower() in ('true', '1', 'yes', 'on')
        if isinstance(default_value, int):
            return int(value)
        if isinstance(default_value, float):
            return float(value)
        return value

    def get(self, section: str, key: Optional[str] = None) -> Any:
        """Get configuration value."""
        if key is None:
            return self.config.get(section, {})
        return self.config.get(section, {}).get(key)

    def set(self, section: str, key: str, value: Any) -> bool:
        """Set a configuration value and persist it."""
        known_keys = self.DEFAULT_CONFIG.get(section)
        if known_keys is not None and key not in known_keys:
            self.console.print(f"[yellow]Warning: Unknown config key '{section}.{key}'[/yellow]")

        self.config.setdefault(section, {})[key] = value
        return self.save_config()

    def save_config(self) -> bool:
        """Write the current configuration to the JSON config file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(json.dumps(self.config, indent=2))
        except OSError as e:
            self.console.print(f"[red]Error saving config: {e}[/red]")
            return False
        return True

    def set_env_var(self, key: str, value: str) -> bool:
        """Set environment variable in .env file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            set_key(str(self.env_file), key, value)
            # load_dotenv does not override variables already in the process
            os.environ[key] = value
            self.config = self._load_config()
            return True
        except OSError as e:
            self.console.print(f"[red]Error setting environment variable: {e}[/red]")
            return False

    def unset_env_var(self, key: str) -> bool:
        """Remove environment variable from .env file."""
        try:
            if self.env_file.exists():
                unset_key(str(self.env_file), key)
            os.environ.pop(key, None)
            self.config = self._load_config()
            return True
        except OSError as e:
            self.console.print(f"[red]Error removing environment variable: {e}[/red]")
            return False

    def reset_to_defaults(self) -> bool:
        """Reset configuration to default values."""
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        return self.save_config()

    def validate_config(self) -> List[str]:
        """Validate current configuration and return list of issues."""
        issues = []

        dimension = self.get("embedding", "dimension")
        if isinstance(dimension, bool) or not isinstance(dimension, int) or dimension < 1:
            issues.append(f"Invalid embedding dimension: {dimension}")

        scale = self.get("embedding", "scale")
        if isinstance(scale, bool) or not isinstance(scale, (int, float)) or scale <= 0:
            issues.append(f"Invalid embedding scale: {scale}")

        top_k = self.get("matching", "top_k")
        if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 1:
            issues.append(f"Invalid top_k: {top_k}")

        base_url = self.get("remote", "base_url")
        if not isinstance(base_url, str) or not base_url.startswith(("http://", "https://")):
            issues.append(f"Invalid remote base URL: {base_url}")

        timeout = self.get("remote", "timeout")
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            issues.append(f"Invalid remote timeout: {timeout}")

        export_format = self.get("export", "default_format")
        if export_format not in ["csv", "json"]:
            issues.append(f"Invalid export format: {export_format}")

        return issues

    def display_config(self, section: Optional[str] = None) -> None:
        """Display current configuration in a formatted table."""
        self.console.print("[bold cyan]TalentMatch Configuration[/bold cyan]")
        self.console.print()

        for section_name, section_data in self.config.items():
            if section and section_name != section:
                continue

            table = Table(title=f"{section_name.title()} Settings")
            table.add_column("Setting", style="cyan")
            table.add_column("Value", style="green")
            table.add_column("Type", style="dim")

            for key, value in section_data.items():
                value_str = str(value)
                if isinstance(value, bool):
                    value_str = "✓" if value else "✗"
                elif isinstance(value, str) and len(value) > 50:
                    value_str = value[:47] + "..."

                table.add_row(
                    key.replace("_", " ").title(),
                    value_str,
                    type(value).__name__
                )

            self.console.print(table)
            self.console.print()

    def get_env_template(self) -> str:
        """Generate a template .env file with all available settings."""
        template_lines = [
            "# TalentMatch Configuration",
            "# Copy this file to .env and modify as needed",
        ]

        current_section = None
        for env_var, (section, key) in self.ENV_MAPPINGS.items():
            if section != current_section:
                template_lines.append("")
                template_lines.append(f"# {section.title()} Settings")
                current_section = section

            default_value = self.DEFAULT_CONFIG[section][key]
            if isinstance(default_value, bool):
                default_value = str(default_value).lower()
            template_lines.append(f"# {env_var}={default_value}")

        template_lines.append("")
        return "\n".join(template_lines)

    def export_env_template(self, output_path: Optional[str] = None) -> bool:
        """Export .env template to file."""
        try:
            template_path = output_path or ".env.template"
            with open(template_path, 'w') as f:
                f.write(self.get_env_template())
            self.console.print(f"[green]✓ .env template exported to: {template_path}[/green]")
            return True
        except OSError as e:
            self.console.print(f"[red]Error exporting template: {e}[/red]")
            return False


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    if not hasattr(get_config_manager, '_instance'):
        get_config_manager._instance = ConfigManager()
    return get_config_manager._instance


def reload_config():
    """Reload configuration from files."""
    if hasattr(get_config_manager, '_instance'):
        get_config_manager._instance = ConfigManager()
    return get_config_manager()
