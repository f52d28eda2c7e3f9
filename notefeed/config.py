"""
Configuration management for notefeed.

This module handles loading and accessing configuration values from config.yaml.
Secrets and collection identifiers can be supplied through the environment
(or a .env file), which takes precedence over the YAML values.
"""

import yaml
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from dotenv import load_dotenv


# Environment variable -> dot-separated config key it overrides
ENV_OVERRIDES = {
    "NOTION_DATABASE_ID": "notion.posts_database_id",
    "NOTION_READING_NOTES_DATABASE_ID": "notion.reading_notes_database_id",
}


class ConfigManager:
    """
    Manages configuration loading and access for notefeed.
    """
    
    def __init__(self, config_path: str = "config.yaml", use_env: bool = True):
        """
        Initialize the configuration manager.
        
        Args:
            config_path: Path to the configuration file
            use_env: Whether environment variables override file values
        """
        self.config_path = Path(config_path)
        self.use_env = use_env
        self._config: Dict[str, Any] = {}
        self._load_config()
    
    def _load_config(self) -> None:
        """Load configuration from YAML file, then apply environment overrides."""
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
                
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
            self._config = self._merge(self._get_default_config(), loaded)
                
            logging.info(f"Configuration loaded from {self.config_path}")
            
        except Exception as e:
            logging.warning(f"Failed to load configuration, using defaults: {e}")
            self._config = self._get_default_config()

        if self.use_env:
            self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        """Copy collection ids from the environment into the loaded config."""
        load_dotenv()
        for env_name, key_path in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                self._set(key_path, value)

    def _set(self, key_path: str, value: Any) -> None:
        keys = key_path.split('.')
        section = self._config
        for key in keys[:-1]:
            section = section.setdefault(key, {})
        section[keys[-1]] = value

    @classmethod
    def _merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge override into a copy of base."""
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = cls._merge(merged[key], value)
            else:
                merged[key] = value
        return merged
            
    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "notion": {
                "auth_env": "NOTION_SECRET",
                "posts_database_id": "",
                "reading_notes_database_id": "",
                "timeout": 30.0,
                "page_size": 100
            },
            "content": {
                "untitled_post_title": "Untitled",
                "untitled_note_title": "無題"
            },
            "parser": {
                "strict_images": False
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "file": ""
            }
        }
    
    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.
        
        Args:
            key_path: Dot-separated path to the configuration value (e.g., "notion.timeout")
            default: Default value if key is not found
            
        Returns:
            The configuration value
            
        Examples:
            config.get("notion.page_size")  # Returns 100
            config.get("content.untitled_post_title")  # Returns "Untitled"
        """
        keys = key_path.split('.')
        value = self._config
        
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
                
        return value
    
    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.
        
        Args:
            section: Name of the configuration section
            
        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})
    
    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
    
    # Convenience properties for commonly used values

    @property
    def notion_auth(self) -> Optional[str]:
        """Get the Notion integration secret from the configured environment variable."""
        if self.use_env:
            load_dotenv()
        return os.getenv(self.get("notion.auth_env", "NOTION_SECRET"))
    
    @property
    def posts_database_id(self) -> str:
        """Get the posts collection id."""
        return self.get("notion.posts_database_id", "")
    
    @property
    def reading_notes_database_id(self) -> str:
        """Get the reading notes collection id."""
        return self.get("notion.reading_notes_database_id", "")
    
    @property
    def notion_timeout(self) -> float:
        """Get the Notion request timeout in seconds."""
        return float(self.get("notion.timeout", 30.0))

    @property
    def page_size(self) -> int:
        return int(self.get("notion.page_size", 100))
    
    @property
    def untitled_post_title(self) -> str:
        """Get the fallback title for posts."""
        return self.get("content.untitled_post_title", "Untitled")
    
    @property
    def untitled_note_title(self) -> str:
        """Get the fallback title for reading notes."""
        return self.get("content.untitled_note_title", "無題")
    
    @property
    def strict_images(self) -> bool:
        """Whether an image block without any URL fails the whole document."""
        return bool(self.get("parser.strict_images", False))


def setup_logging(manager: Optional[ConfigManager] = None) -> None:
    """Configure logging for the application."""
    manager = manager or config
    level = getattr(logging, str(manager.get("logging.level", "INFO")).upper(), logging.INFO)
    format_str = manager.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = manager.get("logging.file", "")

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=handlers
    )


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.
    
    Returns:
        The global ConfigManager instance
    """
    return config
