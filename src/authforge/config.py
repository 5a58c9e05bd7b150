"""Configuration management for authforge."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DEPENDENCIES = {
    "cupertino_icons": "^1.0.8",
    "firebase_core": "^3.6.0",
    "firebase_auth": "^5.3.1",
    "cloud_firestore": "^5.4.4",
    "dio": "^5.7.0",
    "provider": "^6.1.2",
    "flutter_secure_storage": "^9.2.2",
    "go_router": "^14.2.8",
    "google_fonts": "^6.2.1",
}

DEFAULT_DEV_DEPENDENCIES = {
    "flutter_lints": "^4.0.0",
}


class FrozenModel(BaseModel):
    """Base for configuration sections that must not change during a run."""

    model_config = ConfigDict(frozen=True)


class AndroidConfig(FrozenModel):
    """Android SDK levels written into the Gradle build script."""

    compile_sdk: int = 34
    min_sdk: int = 21
    target_sdk: int = 34


class FlutterConfig(FrozenModel):
    """Flutter toolchain settings."""

    exec: str = "flutter"
    min_version: str = "3.2.0"
    sdk_constraint: str = ">=3.2.0 <4.0.0"


class ToolsConfig(FrozenModel):
    """Executables for the optional collaborators."""

    firebase: str = "firebase"
    gh: str = "gh"
    git: str = "git"
    editor: str = "code"


class EmulatorsConfig(FrozenModel):
    """Local Firebase emulator ports."""

    auth_port: int = 9099
    firestore_port: int = 8080
    functions_port: int = 5001


class ProjectDefaults(FrozenModel):
    """Defaults applied to every generated project."""

    org: str = "com.example"
    description: str = "A production-ready Flutter project with Firebase Authentication."
    license_holder: str = "[Your Name]"
    ci_branch: str = "main"


class BootstrapConfig(FrozenModel):
    """Root configuration for authforge."""

    project: ProjectDefaults = Field(default_factory=ProjectDefaults)
    android: AndroidConfig = Field(default_factory=AndroidConfig)
    flutter: FlutterConfig = Field(default_factory=FlutterConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    emulators: EmulatorsConfig = Field(default_factory=EmulatorsConfig)
    dependencies: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_DEPENDENCIES))
    dev_dependencies: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DEV_DEPENDENCIES)
    )


def load_config(config_path: Path | None = None) -> BootstrapConfig:
    """Load config from a TOML file.

    Args:
        config_path: Path to config.toml, or None for defaults

    Returns:
        Loaded configuration, or defaults if no path is given
    """
    if config_path is None:
        return BootstrapConfig()
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return BootstrapConfig.model_validate(data)


def write_config_template(config_path: Path) -> Path:
    """Write a config.toml populated with the default values.

    Args:
        config_path: Destination file

    Returns:
        Path to the written config file
    """
    template = BootstrapConfig().model_dump()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
