from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from rsabench.io.yaml import read_yaml
from rsabench.schema.models import BenchSettings

DEFAULT_SETTINGS_FILENAME = "rsabench.yaml"
SETTINGS_ENV_VAR = "RSABENCH_CONFIG"


def resolve_settings_path(explicit: Optional[Union[str, Path]] = None) -> Optional[str]:
    """Find the settings file to load, or None to use the built-in defaults.

    Priority: explicit path -> $RSABENCH_CONFIG -> ./rsabench.yaml.
    An explicit or env-provided path that does not exist raises FileNotFoundError;
    a directory resolves to `<dir>/rsabench.yaml`.
    """
    candidate = explicit if explicit is not None else os.getenv(SETTINGS_ENV_VAR)
    if candidate:
        p = Path(candidate).expanduser()
        if p.is_dir():
            p = p / DEFAULT_SETTINGS_FILENAME
        if not p.is_file():
            raise FileNotFoundError(f"{p} not found")
        return str(p)
    local = Path.cwd() / DEFAULT_SETTINGS_FILENAME
    if local.is_file():
        return str(local)
    return None


def load_settings(explicit: Optional[Union[str, Path]] = None) -> BenchSettings:
    path = resolve_settings_path(explicit)
    if path is None:
        return BenchSettings()
    return BenchSettings.model_validate(read_yaml(path))
