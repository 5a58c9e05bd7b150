"""Core scaffolding logic for authforge.

This package contains the sequencing and generation logic:
- templates: Placeholder rendering of packaged templates
- sequencer: Step state machine and failure policy
- steps: The ordered scaffolding step catalogue
- android: Structural edits of the generated Android build
"""

from .android import add_flavors, add_internet_permission, configure_android, set_sdk_levels
from .sequencer import FailurePolicy, SequenceResult, Sequencer, Step, StepContext
from .steps import build_steps, template_variables
from .templates import find_placeholders, load_template, render, render_spec, render_template

__all__ = [
    "FailurePolicy",
    "SequenceResult",
    "Sequencer",
    "Step",
    "StepContext",
    "add_flavors",
    "add_internet_permission",
    "build_steps",
    "configure_android",
    "find_placeholders",
    "load_template",
    "render",
    "render_spec",
    "render_template",
    "set_sdk_levels",
    "template_variables",
]
