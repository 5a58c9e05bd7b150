"""Shared test fixtures for authforge tests."""

import subprocess
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from authforge.config import BootstrapConfig
from authforge.core.sequencer import StepContext
from authforge.models import ProjectContext, RunLog, ToolStatus
from authforge.services.prober import build_requirements

GRADLE_SCRIPT = """plugins {
    id "com.android.application"
    id "kotlin-android"
    id "dev.flutter.flutter-gradle-plugin"
}

android {
    namespace = "com.example.demo_app"
    compileSdk = flutter.compileSdkVersion
    ndkVersion = flutter.ndkVersion

    defaultConfig {
        applicationId = "com.example.demo_app"
        minSdk = flutter.minSdkVersion
        targetSdk = flutter.targetSdkVersion
        versionCode = flutter.versionCode
        versionName = flutter.versionName
    }

    buildTypes {
        release {
            signingConfig = signingConfigs.debug
        }
    }
}
"""

ANDROID_MANIFEST = """<manifest xmlns:android="http://schemas.android.com/apk/res/android">
    <application
        android:label="demo_app"
        android:icon="@mipmap/ic_launcher">
    </application>
</manifest>
"""


def make_flutter_project(project_dir: Path) -> Path:
    """Lay out the files `flutter create` would leave behind."""
    app_dir = project_dir / "android" / "app"
    (app_dir / "src" / "main").mkdir(parents=True)
    (app_dir / "build.gradle").write_text(GRADLE_SCRIPT)
    (app_dir / "src" / "main" / "AndroidManifest.xml").write_text(ANDROID_MANIFEST)
    (project_dir / "lib").mkdir()
    (project_dir / "lib" / "main.dart").write_text("void main() {}\n")
    (project_dir / "pubspec.yaml").write_text(f"name: {project_dir.name}\n")
    (project_dir / "README.md").write_text(f"# {project_dir.name}\n")
    return project_dir


class FakeToolchain:
    """Stand-in for PATH lookups and external processes.

    ``available`` maps tool executable to the version its ``--version``
    probe reports. ``failures`` maps a ``"<exe> <first-arg>"`` prefix to an
    exit code. Every non-probe invocation is recorded in ``calls``.
    ``after_create`` runs on the project directory `flutter create` lays out.
    """

    def __init__(self) -> None:
        self.available: dict[str, str] = {"flutter": "3.24.3", "git": "2.43.0"}
        self.failures: dict[str, int] = {}
        self.calls: list[list[str]] = []
        self.after_create: Callable[[Path], None] | None = None

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self.available else None

    def run(self, cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        exe = Path(cmd[0]).name
        if cmd[1:] == ["--version"]:
            return subprocess.CompletedProcess(
                cmd, 0, stdout=f"{exe} version {self.available.get(exe, '')}\n", stderr=""
            )

        self.calls.append([exe, *cmd[1:]])
        key = " ".join([exe, *cmd[1:2]])
        if key in self.failures:
            return subprocess.CompletedProcess(
                cmd, self.failures[key], stdout="", stderr=f"{key} failed"
            )

        if exe == "flutter" and cmd[1] == "create":
            cwd = Path(str(kwargs["cwd"]))
            project_dir = make_flutter_project(cwd / cmd[-1])
            if self.after_create is not None:
                self.after_create(project_dir)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    def invoked(self, *prefix: str) -> bool:
        """Return True if some recorded call starts with prefix."""
        return any(call[: len(prefix)] == list(prefix) for call in self.calls)


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def toolchain() -> Generator[FakeToolchain, None, None]:
    """Patch tool lookup and subprocess execution with a FakeToolchain."""
    fake = FakeToolchain()
    with (
        patch("authforge.services.prober.shutil.which", side_effect=fake.which),
        patch("authforge.services.prober.subprocess.run", side_effect=fake.run),
        patch("authforge.services.runner.subprocess.run", side_effect=fake.run),
    ):
        yield fake


@pytest.fixture
def config() -> BootstrapConfig:
    """Default configuration."""
    return BootstrapConfig()


@pytest.fixture
def make_context(
    tmp_path: Path, config: BootstrapConfig
) -> Callable[..., StepContext]:
    """Factory for StepContext objects rooted in tmp_path.

    Keyword arguments become ProjectContext options; ``tools`` overrides
    the probe results (flutter and git present by default).
    """

    def factory(tools: dict[str, ToolStatus] | None = None, **options: object) -> StepContext:
        if tools is None:
            tools = {
                "flutter": ToolStatus(name="flutter", present=True, version="3.24.3"),
                "git": ToolStatus(name="git", present=True, version="2.43.0"),
            }
        project = ProjectContext.create("demo_app", tmp_path, **options)
        return StepContext(
            project=project,
            config=config,
            requirements=build_requirements(config),
            tools=tools,
            run_log=RunLog(),
        )

    return factory


@pytest.fixture
def gradle_script() -> str:
    """App-level Gradle script as generated by `flutter create`."""
    return GRADLE_SCRIPT


@pytest.fixture
def android_manifest() -> str:
    """AndroidManifest.xml as generated by `flutter create`."""
    return ANDROID_MANIFEST


@pytest.fixture
def flutter_project(tmp_path: Path) -> Path:
    """A fake Flutter project directory at tmp_path/demo_app."""
    return make_flutter_project(tmp_path / "demo_app")
