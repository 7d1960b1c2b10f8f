from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from pluginopts.extraction.results import MISSING, ExtractionError


@dataclass
class Setting:
    """One leaf option. default is MISSING when nothing could be resolved."""
    name: str
    nix_type: str
    description: Optional[str] = None
    default: Any = MISSING
    enum_values: Optional[Tuple[Any, ...]] = None
    enum_labels: Optional[Dict[str, str]] = None
    example: Optional[str] = None
    hidden: Optional[bool] = None
    restart_needed: bool = False
    errors: Tuple[ExtractionError, ...] = ()


@dataclass
class SettingGroup:
    name: str
    description: Optional[str] = None
    children: Dict[str, Union[Setting, "SettingGroup"]] = field(default_factory=dict)


@dataclass
class PluginSettings:
    """Everything extracted from one plugin's sources."""
    name: str
    description: Optional[str] = None
    directory_name: Optional[str] = None
    settings: Dict[str, Union[Setting, SettingGroup]] = field(default_factory=dict)
