from __future__ import annotations

from .load import load_config
from .schema import AppConfig, CacheFamilyConfig, EnvOverrides

__all__ = ["AppConfig", "CacheFamilyConfig", "EnvOverrides", "load_config"]
