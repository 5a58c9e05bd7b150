"""Structural edits of the Flutter-generated Android build files.

Each edit locates an anchor in the generated file and raises PatchFailed
when the anchor is missing, so a changed Flutter template surfaces as an
error instead of a silent no-op.
"""

import re
from pathlib import Path

from ..config import AndroidConfig
from ..errors import PatchFailed
from ..models import OverwritePolicy, RunLog
from ..services.filesystem import read_file, write_file
from .templates import render_template

GRADLE_SCRIPTS = ("build.gradle", "build.gradle.kts")
INTERNET_PERMISSION = '<uses-permission android:name="android.permission.INTERNET"/>'


def find_gradle_script(project_dir: Path) -> Path:
    """Return the app-level Gradle script (Groovy or Kotlin DSL)."""
    app_dir = project_dir / "android" / "app"
    for name in GRADLE_SCRIPTS:
        candidate = app_dir / name
        if candidate.exists():
            return candidate
    raise PatchFailed(app_dir / GRADLE_SCRIPTS[0], "build.gradle")


def _set_sdk_level(text: str, key: str, value: int, source: Path) -> str:
    # Matches both `minSdk = flutter.minSdkVersion` and `minSdkVersion 21`.
    pattern = re.compile(
        rf"^(?P<indent>[ \t]*)(?P<key>{key}(?:Version)?)(?P<sep>[ \t]*=[ \t]*|[ \t]+)\S.*$",
        re.MULTILINE,
    )
    text, count = pattern.subn(rf"\g<indent>\g<key>\g<sep>{value}", text)
    if count == 0:
        raise PatchFailed(source, key)
    return text


def set_sdk_levels(text: str, android: AndroidConfig, source: Path) -> str:
    """Pin compile, min and target SDK levels."""
    text = _set_sdk_level(text, "compileSdk", android.compile_sdk, source)
    text = _set_sdk_level(text, "minSdk", android.min_sdk, source)
    return _set_sdk_level(text, "targetSdk", android.target_sdk, source)


def _block_end(text: str, open_brace: int) -> int:
    depth = 0
    for index in range(open_brace, len(text)):
        if text[index] == "{":
            depth += 1
        elif text[index] == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def add_flavors(text: str, snippet: str, source: Path) -> str:
    """Insert product flavors after the ``defaultConfig`` block.

    Scripts that already declare ``productFlavors`` are returned unchanged.
    """
    if "productFlavors" in text:
        return text
    match = re.search(r"defaultConfig\s*\{", text)
    if match is None:
        raise PatchFailed(source, "defaultConfig {")
    end = _block_end(text, match.end() - 1)
    if end == -1:
        raise PatchFailed(source, "end of defaultConfig block")
    return text[: end + 1] + "\n\n" + snippet.rstrip("\n") + text[end + 1 :]


def add_internet_permission(text: str, source: Path) -> str:
    """Declare the INTERNET permission before the ``<application`` element."""
    if "android.permission.INTERNET" in text:
        return text
    match = re.search(r"^([ \t]*)<application", text, re.MULTILINE)
    if match is None:
        raise PatchFailed(source, "<application")
    indent = match.group(1) or "    "
    line = f"{indent}{INTERNET_PERMISSION}\n"
    return text[: match.start()] + line + text[match.start() :]


def configure_android(
    project_dir: Path,
    android: AndroidConfig,
    flavors_enabled: bool,
    run_log: RunLog | None = None,
) -> list[Path]:
    """Apply SDK levels, flavors and permissions to the Android project.

    Returns:
        The files that were rewritten
    """
    gradle = find_gradle_script(project_dir)
    text = set_sdk_levels(read_file(gradle), android, gradle)
    if flavors_enabled:
        template = "flavors.gradle.kts.tmpl" if gradle.suffix == ".kts" else "flavors.gradle.tmpl"
        text = add_flavors(text, render_template(template, {}), gradle)
    write_file(gradle, text, OverwritePolicy.OVERWRITE, run_log)

    manifest = project_dir / "android" / "app" / "src" / "main" / "AndroidManifest.xml"
    if not manifest.exists():
        raise PatchFailed(manifest, "AndroidManifest.xml")
    write_file(
        manifest,
        add_internet_permission(read_file(manifest), manifest),
        OverwritePolicy.OVERWRITE,
        run_log,
    )
    return [gradle, manifest]
