"""
Centralized settings and path configuration for the quote tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 4 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Collaborator stores
    schedules_path: Path
    quotes_path: Path

    # Packaged default rate cards
    seed_path: Path

    # Whether storage counts toward the monthly total
    include_storage: bool = True

    # Default harmonization warning ceilings, percent
    discount_thresholds: dict = field(default_factory=lambda: {'global': 20.0})

    log_level: str = "INFO"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        data_dir = Path(os.environ.get('QUOTE_TOOL_DATA_DIR', root / 'data'))

        thresholds = {'global': float(os.environ.get('QUOTE_TOOL_DISCOUNT_THRESHOLD', 20.0))}

        return cls(
            project_root=root,
            data_dir=data_dir,
            schedules_path=data_dir / 'rate_cards.json',
            quotes_path=data_dir / 'quotes.json',
            seed_path=Path(__file__).resolve().parent.parent / 'data' / 'schedules_seed.json',
            include_storage=_env_flag('QUOTE_TOOL_INCLUDE_STORAGE', True),
            discount_thresholds=thresholds,
            log_level=os.environ.get('QUOTE_TOOL_LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
