"""The ordered scaffolding steps.

Each action reads the shared StepContext, writes files through the file
writer or runs external commands through the command runner, and returns a
short summary for the run log. Failures are raised, never handled here.
"""

from datetime import date
from pathlib import Path
from typing import Any

from ..errors import WriteFailed
from ..models import OverwritePolicy, TemplateSpec
from ..services.filesystem import ensure_directory, write_file
from ..services.prober import ensure_requirements
from ..services.runner import run_command
from .android import configure_android
from .sequencer import FailurePolicy, Step, StepContext
from .templates import render_spec

MVVM_DIRECTORIES = (
    "lib/core/config",
    "lib/core/utils",
    "lib/data/models",
    "lib/data/services",
    "lib/ui/pages",
    "lib/ui/viewmodels",
    "lib/ui/widgets",
    "lib/routes",
)

SOURCE_FILES = (
    ("lib/data/services/auth_service.dart", "auth_service.dart.tmpl"),
    ("lib/ui/pages/auth_page.dart", "auth_page.dart.tmpl"),
    ("lib/ui/viewmodels/auth_viewmodel.dart", "auth_viewmodel.dart.tmpl"),
    ("lib/main.dart", "main.dart.tmpl"),
    ("lib/routes/app_router.dart", "app_router.dart.tmpl"),
    ("lib/ui/pages/home.dart", "home.dart.tmpl"),
)


def _pin_block(pins: dict[str, str]) -> str:
    return "\n".join(f"  {name}: {version}" for name, version in pins.items())


def template_variables(ctx: StepContext) -> dict[str, Any]:
    """Resolve every placeholder value from the project context and config."""
    project = ctx.project
    config = ctx.config
    flutter_version = ctx.tool_version("flutter") or config.flutter.min_version

    if project.flavors_enabled:
        build_command = "flutter build apk --flavor dev"
        run_command_line = "flutter run --flavor dev"
        flavors_summary = "Dev and prod environments with distinct application IDs."
        android_apps = f"`dev` ({project.app_id}.dev) and `prod` ({project.app_id})"
    else:
        build_command = "flutter build apk"
        run_command_line = "flutter run"
        flavors_summary = "Single environment (flavors disabled)."
        android_apps = f"`{project.app_id}`"

    return {
        "project_name": project.project_name,
        "org": project.org,
        "app_id": project.app_id,
        "description": config.project.description,
        "sdk_constraint": config.flutter.sdk_constraint,
        "dependencies": _pin_block(config.dependencies),
        "dev_dependencies": _pin_block(config.dev_dependencies),
        "use_emulator": project.use_emulator,
        "auth_port": config.emulators.auth_port,
        "firestore_port": config.emulators.firestore_port,
        "functions_port": config.emulators.functions_port,
        "flutter_version": flutter_version,
        "flutter_min_version": config.flutter.min_version,
        "ci_branch": config.project.ci_branch,
        "build_command": build_command,
        "run_command": run_command_line,
        "flavors_summary": flavors_summary,
        "android_apps": android_apps,
        "backend_project_id": project.backend_project_id or "<your-firebase-project-id>",
        "year": date.today().year,
        "license_holder": config.project.license_holder,
    }


def _spec(
    ctx: StepContext,
    destination: str,
    template: str,
    policy: OverwritePolicy = OverwritePolicy.OVERWRITE,
) -> TemplateSpec:
    return TemplateSpec(
        destination=Path(destination),
        template=template,
        variables=template_variables(ctx),
        policy=policy,
    )


def emit(ctx: StepContext, specs: list[TemplateSpec]) -> list[Path]:
    """Render and write each spec under the project directory."""
    written: list[Path] = []
    for spec in specs:
        path = ctx.project.target_dir / spec.destination
        write_file(path, render_spec(spec), spec.policy, ctx.run_log)
        written.append(path)
    return written


def _written(paths: list[Path]) -> str:
    return f"wrote {len(paths)} file(s)"


# ============================================================================
# Actions
# ============================================================================


def check_prerequisites(ctx: StepContext) -> str:
    ensure_requirements(ctx.requirements, ctx.tools)
    found = [name for name, status in ctx.tools.items() if status.present]
    return f"found {', '.join(found)}"


def create_project(ctx: StepContext) -> str:
    target = ctx.project.target_dir
    if target.exists():
        raise WriteFailed(target, "directory already exists")
    ensure_directory(target.parent)
    run_command(
        ctx.config.flutter.exec,
        ["create", "--org", ctx.project.org, ctx.project.project_name],
        cwd=target.parent,
    )
    return str(target)


def configure_manifest(ctx: StepContext) -> str:
    spec = _spec(ctx, "pubspec.yaml", "pubspec.yaml.tmpl", OverwritePolicy.BACKUP_THEN_OVERWRITE)
    emit(ctx, [spec])
    return f"{len(ctx.config.dependencies)} dependencies pinned"


def resolve_dependencies(ctx: StepContext) -> None:
    run_command(ctx.config.flutter.exec, ["pub", "get"], cwd=ctx.project.target_dir)


def generate_structure(ctx: StepContext) -> str:
    for directory in MVVM_DIRECTORIES:
        ensure_directory(ctx.project.target_dir / directory)
    emit(ctx, [_spec(ctx, "lib/core/config/app_config.dart", "app_config.dart.tmpl")])
    return f"created {len(MVVM_DIRECTORIES)} directories"


def link_backend(ctx: StepContext) -> str:
    firebase = ctx.config.tools.firebase
    project_id = ctx.project.backend_project_id or ""
    cwd = ctx.project.target_dir
    run_command(firebase, ["use", project_id, "--add", "--non-interactive"], cwd=cwd)
    run_command(
        firebase,
        ["init", "firestore,auth,functions", "--project", project_id, "--non-interactive"],
        cwd=cwd,
    )
    return f"linked {project_id}"


def configure_backend(ctx: StepContext) -> str:
    specs = [
        _spec(ctx, "firebase.json", "firebase.json.tmpl"),
        _spec(ctx, "firestore.rules", "firestore.rules.tmpl"),
    ]
    return _written(emit(ctx, specs))


def emit_sources(ctx: StepContext) -> str:
    specs = [_spec(ctx, destination, template) for destination, template in SOURCE_FILES]
    return _written(emit(ctx, specs))


def configure_platform(ctx: StepContext) -> str:
    android = ctx.config.android
    configure_android(
        ctx.project.target_dir, android, ctx.project.flavors_enabled, ctx.run_log
    )
    flavors = "dev/prod flavors" if ctx.project.flavors_enabled else "no flavors"
    return f"SDK {android.min_sdk}-{android.target_sdk}, {flavors}"


def configure_ci(ctx: StepContext) -> str:
    return _written(emit(ctx, [_spec(ctx, ".github/workflows/ci.yml", "ci.yml.tmpl")]))


def generate_docs(ctx: StepContext) -> str:
    return _written(emit(ctx, [_spec(ctx, "README.md", "README.md.tmpl")]))


def init_repository(ctx: StepContext) -> str:
    git = ctx.config.tools.git
    cwd = ctx.project.target_dir
    run_command(git, ["init"], cwd=cwd)
    emit(
        ctx,
        [
            _spec(ctx, ".gitignore", "gitignore.tmpl"),
            _spec(ctx, "LICENSE", "LICENSE.tmpl"),
        ],
    )
    run_command(git, ["add", "."], cwd=cwd)
    message = f"Initial commit: Bootstrap {ctx.project.project_name} with Firebase Auth"
    run_command(git, ["commit", "-m", message], cwd=cwd)
    return "initial commit created"


def push_remote(ctx: StepContext) -> str:
    slug = ctx.project.remote_slug
    run_command(
        ctx.config.tools.gh,
        ["repo", "create", slug, "--public", "--source=.", "--remote=origin", "--push"],
        cwd=ctx.project.target_dir,
        interactive=True,
    )
    return f"pushed to {slug}"


def open_editor(ctx: StepContext) -> None:
    run_command(ctx.config.tools.editor, ["."], cwd=ctx.project.target_dir)


# ============================================================================
# Catalogue
# ============================================================================


def build_steps() -> list[Step]:
    """Return the scaffolding steps in execution order."""
    return [
        Step(
            id="check-prerequisites",
            description="Checking prerequisites...",
            action=check_prerequisites,
        ),
        Step(
            id="create-project",
            description="Creating Flutter project...",
            action=create_project,
            depends_on=("check-prerequisites",),
        ),
        Step(
            id="configure-manifest",
            description="Configuring pubspec.yaml...",
            action=configure_manifest,
            depends_on=("create-project",),
        ),
        Step(
            id="resolve-dependencies",
            description="Installing dependencies...",
            action=resolve_dependencies,
            depends_on=("configure-manifest",),
        ),
        Step(
            id="generate-structure",
            description="Creating MVVM folder structure...",
            action=generate_structure,
            depends_on=("create-project",),
        ),
        Step(
            id="link-backend",
            description="Linking Firebase project...",
            action=link_backend,
            policy=FailurePolicy.SKIPPABLE,
            depends_on=("create-project",),
            predicate=lambda ctx: ctx.has_tool("firebase")
            and bool(ctx.project.backend_project_id),
            skip_reason="Firebase CLI not installed or no project id provided",
        ),
        Step(
            id="configure-backend",
            description="Writing Firebase configuration and rules...",
            action=configure_backend,
            policy=FailurePolicy.SKIPPABLE,
            depends_on=("link-backend",),
        ),
        Step(
            id="emit-sources",
            description="Creating authentication UI and logic...",
            action=emit_sources,
            depends_on=("generate-structure",),
        ),
        Step(
            id="configure-android",
            description="Configuring Android...",
            action=configure_platform,
            depends_on=("create-project",),
        ),
        Step(
            id="configure-ci",
            description="Setting up GitHub Actions CI...",
            action=configure_ci,
            policy=FailurePolicy.SKIPPABLE,
            depends_on=("create-project",),
            predicate=lambda ctx: ctx.project.ci_enabled,
            skip_reason="CI disabled",
        ),
        Step(
            id="generate-docs",
            description="Generating README.md...",
            action=generate_docs,
            policy=FailurePolicy.SKIPPABLE,
            depends_on=("create-project",),
        ),
        Step(
            id="init-repository",
            description="Initializing git repository...",
            action=init_repository,
            depends_on=("create-project",),
        ),
        Step(
            id="push-remote",
            description="Creating GitHub repository...",
            action=push_remote,
            policy=FailurePolicy.SKIPPABLE,
            depends_on=("init-repository",),
            predicate=lambda ctx: ctx.has_tool("gh") and ctx.project.push_remote,
            skip_reason="GitHub CLI not installed or push declined",
        ),
        Step(
            id="open-editor",
            description="Opening in editor...",
            action=open_editor,
            policy=FailurePolicy.SKIPPABLE,
            depends_on=("create-project",),
            predicate=lambda ctx: ctx.has_tool("editor") and ctx.project.open_editor,
            skip_reason="editor not found or disabled",
        ),
    ]
