"""
core/service.py — Load a serverless service definition into plain dataclasses.

Reads ``serverless.yml`` (or ``serverless.yaml``) from a service directory and
exposes:
  - function declarations  (``functions:``)
  - environment hierarchy  (``provider.environment`` + ``environment:``)
  - provider defaults      (``provider.stage`` / ``provider.region``)

The environment hierarchy layout::

    environment:
      vars: {LOG_LEVEL: info}
      stages:
        dev:
          vars: {TABLE: users-dev}
          regions:
            us-east-1:
              vars: {BUCKET: users-dev-use1}

The resulting :class:`ServiceConfig` is passed explicitly to every command, so
nothing here holds module-level state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from slstest.core.config import DEFAULT_REGION, DEFAULT_STAGE, SERVICE_FILES, TEST_DIR_NAME
from slstest.core.exceptions import FunctionNotFoundError, ServiceConfigError

log = logging.getLogger(__name__)


def _stringify(mapping: dict | None, where: str) -> dict[str, str]:
    """Coerce a YAML mapping into ``{str: str}``; ``None`` means empty."""
    if mapping is None:
        return {}
    if not isinstance(mapping, dict):
        raise ServiceConfigError(f"{where} must be a mapping, got {type(mapping).__name__}")
    out: dict[str, str] = {}
    for key, value in mapping.items():
        if value is None:
            value = ""
        elif isinstance(value, bool):
            value = "true" if value else "false"
        out[str(key)] = str(value)
    return out


@dataclass(frozen=True)
class FunctionDeclaration:
    """One deployable function as declared by the service."""

    name: str
    handler: str = ""
    environment: dict[str, str] = field(default_factory=dict)

    def handler_parts(self) -> tuple[str, str]:
        """Split ``handler`` into ``(module path, exported method)``.

        The split happens on the last dot so dotted directories survive;
        backslashes are normalised to forward slashes.
        """
        if not self.handler or "." not in self.handler:
            raise ServiceConfigError(f"Function '{self.name}' has no valid handler (got {self.handler!r})")
        module, method = self.handler.rsplit(".", 1)
        return module.replace("\\", "/"), method


@dataclass(frozen=True)
class EnvironmentHierarchy:
    """Global → stage → region variable scopes."""

    global_vars: dict[str, str] = field(default_factory=dict)
    stages: dict[str, dict] = field(default_factory=dict)

    def scopes(self, stage: str | None = None, region: str | None = None) -> list[dict[str, str]]:
        """Return the scopes to apply, least specific first.

        Undeclared stages or regions contribute nothing.
        """
        layers = [self.global_vars]
        if not stage:
            return layers
        stage_cfg = self.stages.get(stage)
        if stage_cfg is None:
            log.debug("No environment declared for stage %r", stage)
            return layers
        layers.append(stage_cfg.get("vars", {}))
        if region:
            region_vars = stage_cfg.get("regions", {}).get(region)
            if region_vars is None:
                log.debug("No environment declared for stage %r region %r", stage, region)
            else:
                layers.append(region_vars)
        return layers


@dataclass
class ServiceConfig:
    """Everything a command needs to know about the service under test."""

    service_path: Path
    name: str = ""
    functions: dict[str, FunctionDeclaration] = field(default_factory=dict)
    environment: EnvironmentHierarchy = field(default_factory=EnvironmentHierarchy)
    stage: str = DEFAULT_STAGE
    region: str = DEFAULT_REGION

    @property
    def test_dir(self) -> Path:
        return self.service_path / TEST_DIR_NAME

    def get_function(self, name: str) -> FunctionDeclaration:
        try:
            return self.functions[name]
        except KeyError:
            raise FunctionNotFoundError(name) from None

    def env_scopes(
        self, function_name: str | None = None, stage: str | None = None, region: str | None = None
    ) -> list[dict[str, str]]:
        """Scopes for one function: global → stage → region → function."""
        layers = self.environment.scopes(stage or self.stage, region or self.region)
        func = self.functions.get(function_name) if function_name else None
        if func is not None and func.environment:
            layers.append(func.environment)
        return layers

    @classmethod
    def from_dict(cls, data: dict, service_path: Path) -> ServiceConfig:
        """Build a ServiceConfig from an already-parsed service definition."""
        if not isinstance(data, dict):
            raise ServiceConfigError("Service definition must be a mapping")

        provider = data.get("provider") or {}
        functions: dict[str, FunctionDeclaration] = {}
        for fname, fdef in (data.get("functions") or {}).items():
            fdef = fdef or {}
            if not isinstance(fdef, dict):
                raise ServiceConfigError(f"functions.{fname} must be a mapping")
            functions[str(fname)] = FunctionDeclaration(
                name=str(fname),
                handler=str(fdef.get("handler") or ""),
                environment=_stringify(fdef.get("environment"), f"functions.{fname}.environment"),
            )

        env_section = data.get("environment") or {}
        global_vars = _stringify(provider.get("environment"), "provider.environment")
        global_vars.update(_stringify(env_section.get("vars"), "environment.vars"))

        stages: dict[str, dict] = {}
        for stage, stage_cfg in (env_section.get("stages") or {}).items():
            stage_cfg = stage_cfg or {}
            regions = {
                str(region): _stringify((region_cfg or {}).get("vars"), f"environment.stages.{stage}.regions.{region}")
                for region, region_cfg in (stage_cfg.get("regions") or {}).items()
            }
            stages[str(stage)] = {
                "vars": _stringify(stage_cfg.get("vars"), f"environment.stages.{stage}.vars"),
                "regions": regions,
            }

        service = data.get("service") or ""
        if isinstance(service, dict):  # legacy ``service: {name: ...}``
            service = service.get("name", "")

        return cls(
            service_path=Path(service_path),
            name=str(service),
            functions=functions,
            environment=EnvironmentHierarchy(global_vars=global_vars, stages=stages),
            stage=str(provider.get("stage") or DEFAULT_STAGE),
            region=str(provider.get("region") or DEFAULT_REGION),
        )

    @classmethod
    def load(cls, service_path: Path | str = ".") -> ServiceConfig:
        """Load ``serverless.yml`` from *service_path*."""
        root = Path(service_path).resolve()
        for candidate in SERVICE_FILES:
            path = root / candidate
            if path.exists():
                break
        else:
            raise ServiceConfigError(f"No {' or '.join(SERVICE_FILES)} found in {root}")

        try:
            with open(path, encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ServiceConfigError(f"Could not parse {path}: {exc}") from exc

        config = cls.from_dict(data, root)
        log.debug("Loaded service %r with %d function(s) from %s", config.name, len(config.functions), path)
        return config
