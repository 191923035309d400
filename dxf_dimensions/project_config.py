"""
JSON-based project configuration for dxf_dimensions.

Allows overriding default configuration values through:
1. .dimstyle.json file in a project directory
2. .dimstyle.json file in the current directory
3. Explicit config file path

Configuration hierarchy (later overrides earlier):
1. Built-in defaults (config.py, DimensionStyle field defaults)
2. User config (~/.dimstyle.json)
3. Project config (./.dimstyle.json)
4. Explicit config

Example .dimstyle.json:
{
    "style": {
        "name": "ISO-25",
        "arrow_size": 2.5,
        "text_height": 2.5,
        "text_offset": 0.625,
        "decimal_separator": ",",
        "dim_length_units": "DECIMAL"
    },
    "geometry": {
        "epsilon": 1e-9,
        "arc_precision": 128
    },
    "text": {
        "use_unicode_symbols": false
    },
    "output": {
        "dxf_version": "R2018",
        "dimension_layer": "DIMENSIONS"
    }
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dxf_dimensions.errors import DimensionError
from dxf_dimensions.styles.dimension_style import (
    AngleUnitType,
    DimensionStyle,
    LinearUnitType,
)

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILENAME = ".dimstyle.json"


@dataclass
class StyleConfig:
    """Defaults for new dimension styles (see ``style_from_config``)."""
    name: str = "Standard"
    arrow_size: float = 0.18
    text_height: float = 0.18
    text_offset: float = 0.09
    ext_line_offset: float = 0.0625
    ext_line_extend: float = 0.18
    center_mark_size: float = 0.09
    dim_scale_overall: float = 1.0
    length_precision: int = 2
    angular_precision: int = 0
    decimal_separator: str = "."
    dim_length_units: str = "DECIMAL"  # LinearUnitType member name
    dim_angular_units: str = "DECIMAL_DEGREES"  # AngleUnitType member name


@dataclass
class GeometryConfig:
    """Numeric tolerances."""
    epsilon: float = 1e-12
    arc_precision: int = 64


@dataclass
class TextConfig:
    """Dimension text symbols."""
    use_unicode_symbols: bool = True


@dataclass
class OutputConfig:
    """DXF export settings."""
    dxf_version: str = "R2010"
    defpoints_layer: str = "Defpoints"
    dimension_layer: str = "0"


@dataclass
class ProjectConfig:
    """Complete project configuration."""
    style: StyleConfig = field(default_factory=StyleConfig)
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    text: TextConfig = field(default_factory=TextConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to JSON file.

        Args:
            path: Output file path
        """
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Create configuration from dictionary.

        Unknown sections and keys (including ``_comment``) are ignored.

        Args:
            data: Configuration dictionary

        Returns:
            ProjectConfig instance
        """
        config = cls()

        for section in ('style', 'geometry', 'text', 'output'):
            if section not in data:
                continue
            target = getattr(config, section)
            for key, value in data[section].items():
                if hasattr(target, key):
                    setattr(target, key, value)
                elif not key.startswith('_'):
                    logger.debug("Unknown config key ignored: %s.%s", section, key)

        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        """Create configuration from JSON string."""
        data = json.loads(json_str)
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load configuration from JSON file.

        Args:
            path: Input file path

        Returns:
            ProjectConfig instance

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(
    base_dir: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find configuration file using search hierarchy.

    Search order:
    1. Explicit config path (if provided)
    2. .dimstyle.json in ``base_dir``
    3. .dimstyle.json in current working directory
    4. ~/.dimstyle.json in user's home directory

    Returns:
        Path to config file if found, None otherwise
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    if base_dir:
        project_config = Path(base_dir) / CONFIG_FILENAME
        if project_config.exists():
            return project_config

    cwd_config = Path.cwd() / CONFIG_FILENAME
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / CONFIG_FILENAME
    if home_config.exists():
        return home_config

    return None


def load_config(
    base_dir: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load configuration with fallback to defaults.

    Returns:
        ProjectConfig instance (defaults if no config file found or the
        file cannot be read)
    """
    config_path = find_config_file(base_dir, explicit_config)

    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, IOError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return ProjectConfig()


def merge_configs(base: ProjectConfig, override: ProjectConfig) -> ProjectConfig:
    """Merge two configurations, with override taking precedence.

    Only non-default values from override are applied.
    """
    merged = ProjectConfig.from_dict(base.to_dict())
    defaults = ProjectConfig()

    for section in ('style', 'geometry', 'text', 'output'):
        default_section = getattr(defaults, section)
        merged_section = getattr(merged, section)
        for key, value in asdict(getattr(override, section)).items():
            if value != getattr(default_section, key):
                setattr(merged_section, key, value)

    return merged


def apply_config_to_globals(config: ProjectConfig) -> None:
    """Apply configuration to global constants in config.py.

    This modifies the dxf_dimensions.config module in-place.
    """
    from dxf_dimensions import config as cfg

    cfg.EPSILON = config.geometry.epsilon
    cfg.ARC_PRECISION = config.geometry.arc_precision
    cfg.USE_UNICODE_SYMBOLS = config.text.use_unicode_symbols
    cfg.DXF_VERSION = config.output.dxf_version
    cfg.DEFPOINTS_LAYER = config.output.defpoints_layer
    cfg.DIMENSION_LAYER = config.output.dimension_layer
    cfg.DEFAULT_STYLE_NAME = config.style.name

    logger.debug("Applied project config to global constants")


def style_from_config(config: ProjectConfig, name: Optional[str] = None) -> DimensionStyle:
    """New dimension style from the ``style`` section.

    Args:
        config: project configuration.
        name: style name; default ``config.style.name``.

    Raises:
        StyleValueError: a configured value is out of range.
        DimensionError: a unit name is not a member of its enum.
    """
    section = config.style
    values = asdict(section)
    values.pop('name')
    length_units = values.pop('dim_length_units')
    angular_units = values.pop('dim_angular_units')

    style = DimensionStyle(name or section.name)
    for prop, value in values.items():
        setattr(style, prop, value)
    style.dim_length_units = _enum_member(LinearUnitType, 'dim_length_units', length_units)
    style.dim_angular_units = _enum_member(AngleUnitType, 'dim_angular_units', angular_units)
    return style


def _enum_member(enum_cls, prop: str, name: str):
    try:
        return enum_cls[str(name).upper()]
    except KeyError:
        raise DimensionError(
            f"Invalid {prop} '{name}'. Available: {', '.join(m.name for m in enum_cls)}"
        ) from None


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> None:
    """Create a sample configuration file with documentation.

    Args:
        path: Output file path (default: .dimstyle.json)
    """
    sample = {
        "_comment": "DXF dimension generator configuration",
        "_version": "1.0",
        "style": {
            "_comment": "Defaults for new dimension styles (drawing units)",
            "name": "Standard",
            "arrow_size": 0.18,
            "text_height": 0.18,
            "text_offset": 0.09,
            "ext_line_offset": 0.0625,
            "ext_line_extend": 0.18,
            "center_mark_size": 0.09,
            "dim_scale_overall": 1.0,
            "length_precision": 2,
            "angular_precision": 0,
            "decimal_separator": ".",
            "dim_length_units": "DECIMAL",
            "dim_angular_units": "DECIMAL_DEGREES",
        },
        "geometry": {
            "_comment": "Zero tolerance and arc tessellation segments",
            "epsilon": 1e-12,
            "arc_precision": 64,
        },
        "text": {
            "_comment": "false writes %%c / %%d control codes",
            "use_unicode_symbols": True,
        },
        "output": {
            "_comment": "DXF export settings",
            "dxf_version": "R2010",
            "defpoints_layer": "Defpoints",
            "dimension_layer": "0",
        },
    }

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)

    logger.info("Sample configuration created: %s", path)
