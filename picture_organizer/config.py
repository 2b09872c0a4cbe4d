"""Configuration management for the picture organizer."""

import copy
import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = [
    ".png", ".jpg", ".mp3", ".mp4", ".epub", ".pdf", ".docx", ".doc",
    ".gif", ".zip", ".htm", ".html", ".css", ".opus", ".m4a", ".avi",
]

DEFAULT_CONFIG: Dict[str, Any] = {
    'organizer': {
        'input_roots': [],
        'output_root': None,
        'month_locale': 'it',
        'extensions': DEFAULT_EXTENSIONS,
        'compare_chunk_size': 1024 * 1024,
        'verify_copies': False,
        'dry_run': False,
        'min_free_space_mb': 0,
    },
    'logging': {
        'level': 'INFO',
        'log_dir': None,
    },
}


class ConfigError(ValueError):
    """Raised when the configuration cannot be used to start a run."""


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Manages organizer configuration from YAML files."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, searches for config files
                and falls back to the built-in defaults.
        """
        self.config_path = config_path or self._find_config_file()
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        if self.config_path:
            self._load_config()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Build a configuration from a dictionary merged over the defaults."""
        config = cls.__new__(cls)
        config.config_path = None
        config.config = _merge(DEFAULT_CONFIG, data or {})
        return config

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in standard locations."""
        # Look for config files in order of preference
        possible_paths = [
            Path.cwd() / "config.local.yml",
            Path.cwd() / "config.yml",
            Path(__file__).parent.parent / "config.local.yml",
            Path(__file__).parent.parent / "config.yml",
        ]

        for config_file in possible_paths:
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return str(config_file.resolve())

        logger.info("No configuration file found, using built-in defaults")
        return None

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
            self.config = _merge(DEFAULT_CONFIG, loaded)
            logger.info(f"Loaded configuration from {self.config_path}")
        except Exception as e:
            logger.error(f"Failed to load config from {self.config_path}: {e}")
            raise

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path like 'organizer.month_locale'
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key_path: str, value: Any) -> None:
        """Set a configuration value using dot notation."""
        keys = key_path.split('.')
        target = self.config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    def get_input_roots(self) -> List[str]:
        """Get list of input root directories."""
        return [str(root) for root in self.get('organizer.input_roots', []) or [] if root]

    def get_output_root(self) -> Optional[str]:
        """Get the output root directory."""
        root = self.get('organizer.output_root')
        return str(Path(root).expanduser()) if root else None

    def get_extensions(self) -> List[str]:
        """Get allowed extensions, lower-cased and with a leading dot."""
        extensions = self.get('organizer.extensions', DEFAULT_EXTENSIONS) or []
        normalized = []
        for ext in extensions:
            ext = str(ext).strip().lower()
            if ext and not ext.startswith('.'):
                ext = '.' + ext
            if ext:
                normalized.append(ext)
        return normalized

    def get_month_locale(self) -> str:
        """Get the locale used for month names."""
        return str(self.get('organizer.month_locale', 'it')).lower()

    def get_compare_chunk_size(self) -> int:
        """Get chunk size in bytes for content comparison."""
        return int(self.get('organizer.compare_chunk_size', 1024 * 1024))

    def should_verify_copies(self) -> bool:
        """Check if copies should be compared against their source."""
        return bool(self.get('organizer.verify_copies', False))

    def is_dry_run(self) -> bool:
        """Check if this is a dry run."""
        return bool(self.get('organizer.dry_run', False))

    def get_min_free_space_mb(self) -> int:
        """Get minimum free space requirement at the output root in MB."""
        return int(self.get('organizer.min_free_space_mb', 0))

    def get_log_level(self) -> str:
        """Get logging level."""
        return self.get('logging.level', 'INFO')

    def get_log_dir(self) -> Optional[str]:
        """Get directory for the log file, if file logging is enabled."""
        log_dir = self.get('logging.log_dir')
        return str(Path(log_dir).expanduser()) if log_dir else None

    def validate_config(self, require_roots: bool = True) -> List[str]:
        """
        Validate configuration and return list of errors.

        Args:
            require_roots: Whether input and output roots must be configured

        Returns:
            List of validation error messages
        """
        from .placement import MONTH_NAMES

        errors = []

        if require_roots:
            if not self.get_input_roots():
                errors.append("No input directories configured")
            if not self.get_output_root():
                errors.append("Output directory not configured")

        locale = self.get_month_locale()
        if locale not in MONTH_NAMES:
            errors.append(
                f"Unsupported month locale: {locale} "
                f"(expected one of {', '.join(sorted(MONTH_NAMES))})"
            )

        if not self.get_extensions():
            errors.append("No supported file extensions configured")

        try:
            chunk_size = self.get_compare_chunk_size()
            if chunk_size < 1:
                errors.append(f"Invalid compare_chunk_size value: {chunk_size} (must be > 0)")
        except (TypeError, ValueError):
            errors.append(f"Invalid compare_chunk_size value: {self.get('organizer.compare_chunk_size')}")

        return errors

    def __str__(self) -> str:
        """String representation of configuration."""
        return f"Config(path={self.config_path}, roots={len(self.get_input_roots())})"
