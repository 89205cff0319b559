"""
Configuration management for linkshelf
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from .taxonomy import CategoryTaxonomy


@dataclass
class FetchConfig:
    """Page fetch settings"""
    timeout: float = 10.0
    max_redirects: int = 5
    accept_language: str = "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7"


@dataclass
class ExtractionConfig:
    """Content extraction settings"""
    parser: str = "html.parser"
    max_chars: int = 4000
    min_content_chars: int = 50


@dataclass
class ClassificationConfig:
    """Classification-related configuration"""
    temperature: float = 0.1
    max_tokens: int = 30
    taxonomy: Dict[str, Any] = field(default_factory=dict)

    def build_taxonomy(self) -> CategoryTaxonomy:
        """Build the category taxonomy, applying any overrides from config."""
        return CategoryTaxonomy.from_dict(self.taxonomy)


@dataclass
class StorageConfig:
    """Link store configuration"""
    db_path: str = "linkshelf.db"
    max_url_length: int = 2048


@dataclass
class Config:
    """Main configuration class for linkshelf"""
    fetch: FetchConfig = field(default_factory=FetchConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    _instance: Optional["Config"] = field(default=None, init=False, repr=False)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from YAML file or use defaults.

        Args:
            config_path: Path to config file. Defaults to config.yaml in the working directory.

        Returns:
            Config instance with loaded or default settings.
        """
        if config_path is None:
            config_path = Path("config.yaml")

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        if "fetch" in data:
            fetch_data = data["fetch"]
            for key in ["timeout", "max_redirects", "accept_language"]:
                if key in fetch_data:
                    setattr(config.fetch, key, fetch_data[key])

        if "extraction" in data:
            extraction_data = data["extraction"]
            for key in ["parser", "max_chars", "min_content_chars"]:
                if key in extraction_data:
                    setattr(config.extraction, key, extraction_data[key])

        if "classification" in data:
            class_data = data["classification"]
            for key in ["temperature", "max_tokens"]:
                if key in class_data:
                    setattr(config.classification, key, class_data[key])
            if "taxonomy" in class_data:
                config.classification.taxonomy = class_data["taxonomy"] or {}

        if "storage" in data:
            storage_data = data["storage"]
            for key in ["db_path", "max_url_length"]:
                if key in storage_data:
                    setattr(config.storage, key, storage_data[key])

        return config

    @classmethod
    def get_instance(cls, config_path: Optional[Path] = None) -> "Config":
        """Get singleton instance of Config.

        Args:
            config_path: Path to config file (only used on first call).

        Returns:
            Singleton Config instance.
        """
        if cls._instance is None:
            cls._instance = cls.load(config_path)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton instance (useful for testing)."""
        cls._instance = None


def get_config(config_path: Optional[Path] = None) -> Config:
    """Convenience function to get config singleton.

    Args:
        config_path: Path to config file (only used on first call).

    Returns:
        Config singleton instance.
    """
    return Config.get_instance(config_path)
