"""htmlbind: Runtime Configuration
---------------------------------------------------------
Pydantic model and loader for the runtime configuration (``runtime.yaml``):
default widget dimensions, locking, manifest directories and plugin sources.

Public API
----------
``RuntimeConfig`` : Root configuration model
``load_runtime_config`` : Load with override chain and caching

Notes
-----
Search order (later overrides earlier):

1. Package default (``htmlbind.core/runtime.yaml``)
2. ``~/.htmlbind/config.yaml`` (user-specific)
3. ``HTMLBIND_CONFIG`` environment variable
4. Explicitly provided ``config_path``
"""

import importlib.resources as ilr
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import HBConfigError, get_logger
from .utils import deep_merge_dicts, load_yaml_file

__all__ = ["RuntimeConfig", "load_runtime_config"]

logger = get_logger()

_RUNTIME_CONFIG_CACHE: "RuntimeConfig | None" = None


class RuntimeConfig(BaseModel):
    """Runtime-wide parameters.

    Attributes
    ----------
    default_width, default_height : int
        Dimensions used for auto-sizing widgets when neither the caller, the
        element nor the widget's sizing policy provides any.
    thread_safe : bool
        Serialize operations per instance with a lock. Only needed when a
        multi-threaded host drives the same element from several threads.
    manifest_dirs : list[str]
        Directories searched for ``*.yaml`` dependency manifests.
    plugin_modules : list[str]
        Modules imported at startup that expose ``register_widgets(registry)``.
    entry_point_group : str
        Entry point group scanned for third-party widgets.
    """

    model_config = ConfigDict(extra="forbid")

    default_width: int = Field(default=960, ge=0)
    default_height: int = Field(default=500, ge=0)
    thread_safe: bool = False
    manifest_dirs: list[str] = Field(default_factory=list)
    plugin_modules: list[str] = Field(default_factory=list)
    entry_point_group: str = Field(default="htmlbind.widgets", min_length=1)

    @field_validator("manifest_dirs", "plugin_modules")
    @classmethod
    def _no_blank_entries(cls, v: list[str]) -> list[str]:
        for item in v:
            if not item or not item.strip():
                raise ValueError("Entries cannot be empty")
        return v

    @property
    def default_size(self) -> tuple[int, int]:
        return self.default_width, self.default_height

    def get_manifest_dirs(self) -> list[Path]:
        """Manifest directories as resolved ``Path`` objects."""
        return [Path(p).expanduser().resolve() for p in self.manifest_dirs]


def load_runtime_config(
    *, force_reload: bool = False, config_path: str | Path | None = None
) -> RuntimeConfig:
    """Load the runtime configuration with the override chain.

    Parameters
    ----------
    force_reload : bool
        If True, ignore the cache and reload.
    config_path : str or Path, optional
        Explicit config file applied last. It must exist.

    Raises
    ------
    HBConfigError
        - [501] The explicit config file cannot be loaded.
        - [502] The merged configuration is invalid.
    """
    global _RUNTIME_CONFIG_CACHE

    if _RUNTIME_CONFIG_CACHE is not None and not force_reload and config_path is None:
        return _RUNTIME_CONFIG_CACHE

    try:
        default_path = ilr.files("htmlbind.core").joinpath("runtime.yaml")
        config_dict = load_yaml_file(Path(str(default_path)))
    except Exception as e:
        logger.warning(f"Could not load default runtime.yaml from package: {e}")
        config_dict = {}

    user_path = Path.home() / ".htmlbind" / "config.yaml"
    if user_path.exists():
        try:
            config_dict = deep_merge_dicts(config_dict, load_yaml_file(user_path))
        except Exception as e:
            logger.warning(f"Failed to load user config {user_path}: {e}")

    env_path = os.environ.get("HTMLBIND_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            try:
                config_dict = deep_merge_dicts(config_dict, load_yaml_file(path))
            except Exception as e:
                logger.warning(f"Failed to load env config {path}: {e}")
        else:
            logger.warning(f"HTMLBIND_CONFIG points to a missing file: {path}")

    if config_path is not None:
        path = Path(config_path)
        try:
            config_dict = deep_merge_dicts(config_dict, load_yaml_file(path))
        except Exception as e:
            raise HBConfigError(f"[501] Failed to load explicit config {path}: {e}") from e

    try:
        config = RuntimeConfig(**config_dict)
    except ValidationError as e:
        raise HBConfigError(f"[502] Invalid runtime configuration: {e}") from e

    if config_path is None:
        _RUNTIME_CONFIG_CACHE = config
    return config
