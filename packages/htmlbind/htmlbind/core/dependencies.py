"""htmlbind: Dependency Manifests
-------------------------------
Pydantic models for the declarative asset manifest of a widget kind, plus
helpers to load manifests from YAML and resolve them into an ordered,
de-duplicated asset list.

Manifest format
---------------
.. code-block:: yaml

    dependencies:
      - name: sigma
        version: 1.0.3
        src: htmlwidgets/lib/sigma-1.0.3
        script:
          - sigma.min.js
          - plugins/sigma.parsers.gexf.min.js
        stylesheet: []

Notes
-----
- Manifests are resolved once at document build time; the lifecycle runtime
  never parses or fetches them and assumes the host already loaded them.
- Inclusion is idempotent: a dependency listed by several widgets appears
  once in the resolved list.
"""

from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import HBConfigError, get_logger
from .utils import load_yaml_file

__all__ = [
    "Dependency",
    "WidgetManifest",
    "load_manifest",
    "resolve_dependencies",
]


class Dependency(BaseModel):
    """One static asset bundle required by a widget kind.

    Examples
    --------
    >>> d = Dependency(name="sigma", version="1.0.3", src="lib/sigma", script=["sigma.js"])
    >>> d.asset_paths()
    ['lib/sigma/sigma.js']
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Dependency name")
    version: str = Field(..., min_length=1, description="Dependency version")
    src: str = Field(..., description="Source directory of the asset files")
    script: list[str] = Field(default_factory=list, description="Script files, in load order")
    stylesheet: list[str] = Field(
        default_factory=list, description="Stylesheet files, in load order"
    )

    @field_validator("script", "stylesheet", mode="before")
    @classmethod
    def _coerce_list(cls, v: object) -> object:
        # YAML allows a single file name instead of a list
        if isinstance(v, str):
            return [v]
        if v is None:
            return []
        return v

    @property
    def key(self) -> tuple[str, str]:
        return self.name, self.version

    def asset_paths(self) -> list[str]:
        """Script paths then stylesheet paths, joined to ``src``."""
        base = PurePosixPath(self.src)
        return [str(base / f) for f in [*self.script, *self.stylesheet]]


class WidgetManifest(BaseModel):
    """Dependency manifest of a widget kind."""

    model_config = ConfigDict(extra="forbid")

    dependencies: list[Dependency] = Field(default_factory=list)


def load_manifest(path: str | Path) -> WidgetManifest:
    """Load a widget manifest from a YAML file.

    Raises
    ------
    HBIOError
        - [100] File not found.
    HBConfigError
        - [500] File cannot be parsed.
        - [520] Content does not match the manifest schema.
    """
    data = load_yaml_file(Path(path))
    try:
        return WidgetManifest.model_validate(data)
    except ValidationError as e:
        raise HBConfigError(f"[520] Invalid dependency manifest {path}: {e}") from e


def resolve_dependencies(
    items: Iterable[WidgetManifest | Dependency],
) -> list[Dependency]:
    """Flatten manifests/dependencies into an ordered, de-duplicated list.

    The first occurrence of a name wins. A later occurrence with a different
    version is dropped with a warning.
    """
    log = get_logger()
    seen: dict[str, Dependency] = {}
    for item in items:
        deps = item.dependencies if isinstance(item, WidgetManifest) else [item]
        for dep in deps:
            prev = seen.get(dep.name)
            if prev is None:
                seen[dep.name] = dep
            elif prev.version != dep.version:
                log.warning(
                    f"[950] Dependency '{dep.name}' requested at version {dep.version} "
                    f"but {prev.version} is already included; keeping {prev.version}"
                )
    return list(seen.values())
