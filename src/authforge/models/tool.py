"""Tool requirement models for environment probing."""

from pydantic import BaseModel, ConfigDict, Field


class ToolRequirement(BaseModel):
    """An external executable the bootstrapper may depend on.

    Attributes:
        name: Logical tool name used as the key in probe results.
        executable: Command looked up on PATH.
        probe_args: Arguments that make the tool print its version, if any.
        min_version: Lowest acceptable version (only checked when required).
        required: Whether absence aborts the run.
        hint: Remediation shown to the operator when the check fails.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Logical tool name")
    executable: str = Field(description="Executable looked up on PATH")
    probe_args: tuple[str, ...] | None = Field(
        default=None, description="Arguments printing the version"
    )
    min_version: str | None = Field(default=None, description="Minimum acceptable version")
    required: bool = Field(default=False, description="Absence is fatal")
    hint: str = Field(default="", description="Remediation hint")


class ToolStatus(BaseModel):
    """Probe finding for a single requirement."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Logical tool name")
    present: bool = Field(description="True if the executable was found")
    version: str | None = Field(default=None, description="Detected version string")
    path: str | None = Field(default=None, description="Resolved executable path")
