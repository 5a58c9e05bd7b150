"""Environment prober: detect external tools and their versions."""

import logging
import re
import shutil
import subprocess

from ..config import BootstrapConfig
from ..constants import PROBE_TIMEOUT
from ..errors import ToolMissing, ToolVersionTooLow
from ..models import ToolRequirement, ToolStatus

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"\d+\.\d+(?:\.\d+)?")


def build_requirements(config: BootstrapConfig) -> list[ToolRequirement]:
    """Build the static tool registry from configuration.

    Order matters: it is the order in which tools are reported.
    """
    return [
        ToolRequirement(
            name="flutter",
            executable=config.flutter.exec,
            probe_args=("--version",),
            min_version=config.flutter.min_version,
            required=True,
            hint="Install from https://flutter.dev/docs/get-started/install "
            "or run 'flutter upgrade'",
        ),
        ToolRequirement(
            name="git",
            executable=config.tools.git,
            probe_args=("--version",),
            required=True,
            hint="Git is required for version control",
        ),
        ToolRequirement(
            name="firebase",
            executable=config.tools.firebase,
            probe_args=("--version",),
            hint="Install via 'npm install -g firebase-tools'",
        ),
        ToolRequirement(
            name="gh",
            executable=config.tools.gh,
            probe_args=("--version",),
            hint="Install the GitHub CLI from https://cli.github.com",
        ),
        ToolRequirement(
            name="editor",
            executable=config.tools.editor,
            hint="Open the project manually",
        ),
    ]


def parse_version(text: str) -> str | None:
    """Return the first version-shaped substring of text, if any."""
    match = VERSION_PATTERN.search(text)
    return match.group(0) if match else None


def version_tuple(version: str) -> tuple[int, int, int]:
    """Split a version into (major, minor, patch), padding missing parts with 0."""
    parts = [int(p) for p in re.findall(r"\d+", version)[:3]]
    parts += [0] * (3 - len(parts))
    return parts[0], parts[1], parts[2]


def version_at_least(found: str, minimum: str) -> bool:
    """Compare versions component-wise: major, then minor, then patch."""
    return version_tuple(found) >= version_tuple(minimum)


def _probe_version(path: str, requirement: ToolRequirement) -> str | None:
    if requirement.probe_args is None:
        return None
    # Required tools are probed without a timeout.
    timeout = None if requirement.required else PROBE_TIMEOUT
    try:
        result = subprocess.run(
            [path, *requirement.probe_args],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"Version probe for {requirement.name} timed out after {timeout}s")
        return None
    except OSError as e:
        logger.debug(f"Version probe for {requirement.name} failed: {e}")
        return None
    return parse_version(f"{result.stdout}\n{result.stderr}")


def probe(requirements: list[ToolRequirement]) -> dict[str, ToolStatus]:
    """Locate each requirement's executable and detect its version.

    Never raises for missing tools; absence is reported as ``present=False``.

    Args:
        requirements: Ordered tool registry

    Returns:
        Mapping of requirement name to ToolStatus
    """
    statuses: dict[str, ToolStatus] = {}
    for requirement in requirements:
        path = shutil.which(requirement.executable)
        if path is None:
            logger.debug(f"{requirement.name}: not found in PATH")
            statuses[requirement.name] = ToolStatus(name=requirement.name, present=False)
            continue

        version = _probe_version(path, requirement)
        logger.debug(f"{requirement.name}: {path} (version {version or 'unknown'})")
        statuses[requirement.name] = ToolStatus(
            name=requirement.name, present=True, version=version, path=path
        )
    return statuses


def check_requirement(requirement: ToolRequirement, status: ToolStatus | None) -> None:
    """Raise if a required tool is absent, of unknown version, or too old.

    Optional tools always pass.
    """
    if not requirement.required:
        return
    if status is None or not status.present:
        raise ToolMissing(requirement.name, requirement.hint)
    if requirement.min_version is None:
        return
    if status.version is None:
        raise ToolMissing(
            requirement.name,
            reason=f"could not detect version (run '{requirement.executable} --version')",
        )
    if not version_at_least(status.version, requirement.min_version):
        raise ToolVersionTooLow(
            requirement.name, status.version, requirement.min_version, requirement.hint
        )


def requirements_met(
    requirements: list[ToolRequirement],
    statuses: dict[str, ToolStatus],
) -> bool:
    """Return True if every required tool passes its check. Never logs."""
    try:
        for requirement in requirements:
            check_requirement(requirement, statuses.get(requirement.name))
    except (ToolMissing, ToolVersionTooLow):
        return False
    return True


def ensure_requirements(
    requirements: list[ToolRequirement],
    statuses: dict[str, ToolStatus],
) -> None:
    """Fail for required tools that are absent or too old.

    Absent optional tools are logged as warnings and never fatal.

    Raises:
        ToolMissing: If a required tool is absent or its version is undetectable
        ToolVersionTooLow: If a required tool is older than its minimum
    """
    for requirement in requirements:
        status = statuses.get(requirement.name)
        if not requirement.required and (status is None or not status.present):
            logger.warning(f"{requirement.name} not installed. {requirement.hint}")
            continue
        check_requirement(requirement, status)
