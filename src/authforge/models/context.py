"""Project context model.

The context holds every fact about the project being scaffolded. It is
built once from CLI input and prompts, then shared read-only with each step.
"""

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ..errors import UsageError

PROJECT_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")

# Dart reserved words cannot be used as package names.
RESERVED_NAMES = frozenset(
    {
        "abstract", "as", "assert", "async", "await", "break", "case", "catch",
        "class", "const", "continue", "default", "do", "dynamic", "else", "enum",
        "export", "extends", "external", "factory", "false", "final", "finally",
        "for", "get", "if", "implements", "import", "in", "is", "library", "new",
        "null", "operator", "part", "rethrow", "return", "set", "static", "super",
        "switch", "this", "throw", "true", "try", "typedef", "var", "void",
        "while", "with", "yield", "flutter", "test",
    }
)  # fmt: skip


def validate_project_name(name: str) -> str:
    """Check that name is usable as a Dart package name.

    Raises:
        UsageError: If the name is empty, malformed, or reserved
    """
    if not name:
        raise UsageError("Project name is required")
    if not PROJECT_NAME_PATTERN.match(name):
        raise UsageError(
            f"Invalid project name '{name}': use lowercase letters, digits and "
            "underscores, starting with a letter"
        )
    if name in RESERVED_NAMES:
        raise UsageError(f"Invalid project name '{name}': reserved word")
    return name


class ProjectContext(BaseModel):
    """Immutable facts about the project being scaffolded.

    Attributes:
        project_name: Dart package name, also the directory name.
        target_dir: Absolute path of the project directory to create.
        org: Reverse-domain organization passed to ``flutter create``.
        backend_project_id: Firebase project id, or None to skip backend steps.
        use_emulator: Default for ``AppConfig.useEmulator`` in the generated app.
        flavors_enabled: Add dev/prod product flavors to the Android build.
        ci_enabled: Generate a CI workflow.
        push_remote: Create and push a GitHub repository.
        remote_owner: GitHub user or organization for the remote.
        remote_repo: Repository name for the remote.
        open_editor: Launch the editor at the end of the run.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(description="Dart package name")
    target_dir: Path = Field(description="Project directory to create")
    org: str = Field(default="com.example", description="Organization identifier")
    backend_project_id: str | None = Field(default=None, description="Firebase project id")
    use_emulator: bool = Field(default=False, description="Use local emulators by default")
    flavors_enabled: bool = Field(default=True, description="Generate dev/prod flavors")
    ci_enabled: bool = Field(default=True, description="Generate CI workflow")
    push_remote: bool = Field(default=False, description="Push to a new remote repository")
    remote_owner: str | None = Field(default=None, description="Remote owner")
    remote_repo: str | None = Field(default=None, description="Remote repository name")
    open_editor: bool = Field(default=True, description="Open the editor when done")

    @classmethod
    def create(cls, project_name: str, parent_dir: Path, **options: object) -> "ProjectContext":
        """Validate the name and build a context rooted under parent_dir."""
        validate_project_name(project_name)
        remote_repo = options.pop("remote_repo", None) or project_name
        backend_project_id = options.pop("backend_project_id", None) or None
        return cls(
            project_name=project_name,
            target_dir=parent_dir.resolve() / project_name,
            remote_repo=remote_repo,
            backend_project_id=backend_project_id,
            **options,
        )

    @property
    def app_id(self) -> str:
        """Android application id for the prod flavor."""
        return f"{self.org}.{self.project_name}"

    @property
    def remote_slug(self) -> str:
        """Remote repository as ``owner/name`` (name alone without an owner)."""
        repo = self.remote_repo or self.project_name
        if self.remote_owner:
            return f"{self.remote_owner}/{repo}"
        return repo
