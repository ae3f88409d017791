from __future__ import annotations

"""Settings for a recipes run and the Fedora REST dialect it talks."""

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

CONFIG_ENV = "SPARQL_RECIPES_CONFIG"
DEFAULT_SNAPSHOT = 4

# Environment variables win over the YAML file.
_ENV_OVERRIDES = {
    "fedora_port": "FCREPO_DYNAMIC_TEST_PORT",
    "fuseki_port": "FUSEKI_DYNAMIC_TEST_PORT",
    "fuseki_mgt_port": "FUSEKI_DYNAMIC_MGT_PORT",
    "fuseki_home": "FUSEKI_HOME",
    "fcrepo_version": "FCREPO_VERSION",
}


@dataclass(frozen=True, slots=True)
class RepositoryProfile:
    """URL suffixes and vocabulary that differ between Fedora 4 betas."""

    snapshot: int = DEFAULT_SNAPSHOT
    datastream_url_suffix: str = "/fcr:metadata"
    datastream_content_url_suffix: str = ""
    datastream_mixin_type: str = "fedora:NonRdfSourceDescription"
    datastream_relation: str = "<http://www.iana.org/assignments/relation/describes>"

    @classmethod
    def for_snapshot(cls, snapshot: int) -> "RepositoryProfile":
        if snapshot < 4:
            return cls(
                snapshot=snapshot,
                datastream_url_suffix="",
                datastream_content_url_suffix="/fcr:content",
                datastream_mixin_type="fedora:datastream",
                datastream_relation="fcrepo:hasContent",
            )
        return cls(snapshot=snapshot)


def profile_for_version(version: str | None) -> RepositoryProfile:
    """Pick the REST dialect from a Fedora version such as ``4.0.0-beta-03``.

    Only ``4.0.0-beta`` versions carry a snapshot number; anything else is
    treated as the current dialect.
    """

    snapshot = DEFAULT_SNAPSHOT
    if version and version.find("-") > 0 and "4.0.0-beta" in version:
        tokens = version.split("-")
        if len(tokens) >= 3:
            try:
                snapshot = int(tokens[2])
            except ValueError:
                snapshot = DEFAULT_SNAPSHOT
    return RepositoryProfile.for_snapshot(snapshot)


@dataclass(slots=True)
class Settings:
    """Where Fedora, the message consumer and Fuseki live, and how long to wait."""

    fedora_port: int = 8080
    fedora_context: str = "fcrepo-webapp"
    consumer_context: str = "fcrepo-message-consumer"
    fuseki_port: int = 3030
    fuseki_mgt_port: int = 3031
    fuseki_dataset: str = "/test"
    fuseki_home: str = "target/jena-fuseki-1.0.1"
    fcrepo_version: str | None = None
    startup_wait_s: float = 30.0
    indexing_wait_s: float = 15.0
    http_timeout_s: float = 15.0

    @property
    def fedora_base_url(self) -> str:
        return f"http://localhost:{self.fedora_port}/{self.fedora_context}"

    @property
    def fuseki_base_url(self) -> str:
        return f"http://localhost:{self.fuseki_port}"

    @property
    def consumer_base_url(self) -> str:
        return f"http://localhost:{self.fedora_port}/{self.consumer_context}"

    @property
    def management_url(self) -> str:
        return f"http://localhost:{self.fuseki_mgt_port}/mgt"

    @property
    def profile(self) -> RepositoryProfile:
        return profile_for_version(self.fcrepo_version)

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data.update(
            fedora_base_url=self.fedora_base_url,
            fuseki_base_url=self.fuseki_base_url,
            consumer_base_url=self.consumer_base_url,
            management_url=self.management_url,
        )
        return data


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _coerce_str(value: Any, default: str | None) -> str | None:
    if value is None or value == "":
        return default
    return str(value)


def _flatten(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Map the sectioned YAML layout onto ``Settings`` field names."""

    fedora = raw.get("fedora") or {}
    fuseki = raw.get("fuseki") or {}
    timing = raw.get("timing") or {}
    return {
        "fedora_port": fedora.get("port"),
        "fedora_context": fedora.get("context"),
        "consumer_context": fedora.get("consumer_context"),
        "fcrepo_version": fedora.get("version"),
        "fuseki_port": fuseki.get("port"),
        "fuseki_mgt_port": fuseki.get("mgt_port"),
        "fuseki_dataset": fuseki.get("dataset"),
        "fuseki_home": fuseki.get("home"),
        "startup_wait_s": timing.get("startup_wait_s"),
        "indexing_wait_s": timing.get("indexing_wait_s"),
        "http_timeout_s": timing.get("http_timeout_s"),
    }


def load_settings(path: Path | None = None, env: Mapping[str, str] | None = None) -> Settings:
    """Load settings from YAML and the environment with safe defaults."""

    env = os.environ if env is None else env
    if path is None and env.get(CONFIG_ENV):
        path = Path(env[CONFIG_ENV])
    raw: dict[str, Any] = {}
    if path is not None and path.exists():
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    values = _flatten(raw)
    for key, var in _ENV_OVERRIDES.items():
        if env.get(var):
            values[key] = env[var]

    defaults = Settings()
    dataset = _coerce_str(values["fuseki_dataset"], defaults.fuseki_dataset)
    if not dataset.startswith("/"):
        dataset = "/" + dataset
    return Settings(
        fedora_port=_coerce_int(values["fedora_port"], defaults.fedora_port),
        fedora_context=_coerce_str(values["fedora_context"], defaults.fedora_context),
        consumer_context=_coerce_str(values["consumer_context"], defaults.consumer_context),
        fuseki_port=_coerce_int(values["fuseki_port"], defaults.fuseki_port),
        fuseki_mgt_port=_coerce_int(values["fuseki_mgt_port"], defaults.fuseki_mgt_port),
        fuseki_dataset=dataset,
        fuseki_home=_coerce_str(values["fuseki_home"], defaults.fuseki_home),
        fcrepo_version=_coerce_str(values["fcrepo_version"], None),
        startup_wait_s=max(0.0, _coerce_float(values["startup_wait_s"], defaults.startup_wait_s)),
        indexing_wait_s=max(0.0, _coerce_float(values["indexing_wait_s"], defaults.indexing_wait_s)),
        http_timeout_s=max(1.0, _coerce_float(values["http_timeout_s"], defaults.http_timeout_s)),
    )


__all__ = [
    "CONFIG_ENV",
    "DEFAULT_SNAPSHOT",
    "RepositoryProfile",
    "Settings",
    "load_settings",
    "profile_for_version",
]
