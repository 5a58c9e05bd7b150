"""Template spec model for generated files."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OverwritePolicy(str, Enum):
    """How the file writer treats an existing destination."""

    FAIL_IF_EXISTS = "fail-if-exists"
    BACKUP_THEN_OVERWRITE = "backup-then-overwrite"
    OVERWRITE = "overwrite"


class TemplateSpec(BaseModel):
    """One generated file: where it goes, which template, which values.

    Attributes:
        destination: Path relative to the project root.
        template: Template name under the package ``templates`` directory.
        variables: Values substituted into the template placeholders.
        policy: How an existing destination is treated.
    """

    model_config = ConfigDict(frozen=True)

    destination: Path = Field(description="Path relative to project root")
    template: str = Field(description="Template file name")
    variables: dict[str, Any] = Field(default_factory=dict, description="Placeholder values")
    policy: OverwritePolicy = Field(
        default=OverwritePolicy.OVERWRITE, description="Existing-file policy"
    )
