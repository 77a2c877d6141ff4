"""Dockerfile template for paul-envs images."""

from .build_plan import ROOT, BuildPlan, BuildStep
from .constants import (
    BASE_IMAGE,
    CACHE_DIR,
    LOCAL_DIR,
    PROJECTS_DIR,
    STAGE_BASE,
    STAGE_PROJECTS,
    STAGE_TOOLS,
)

HEADER = """# Generated by paul-envs for the "{name}" environment.
#
# Sets an Ubuntu LTS environment with the {shell} shell, the wanted language
# toolchains and CLI tools installed and configured, then copies the content
# of the `configs/` directory inside the container's $HOME.
#
# Caches live in $HOME/{cache_dir} and tools' user data (shell history,
# plugins, databases) in $HOME/{local_dir}, so both can be persisted as
# volumes.
"""

BASE_STAGE = """FROM {base_image} AS {stage}

ARG HOST_UID={uid}
ARG HOST_GID={gid}
"""

BASE_ENV = """ENV SHELL=/usr/bin/{shell}

ENV XDG_CACHE_HOME={home}/{cache_dir}/cache \\
    XDG_STATE_HOME={home}/{local_dir}/state \\
    XDG_DATA_HOME={home}/{local_dir}/data
"""

TOOLS_STAGE = """FROM {previous} AS {stage}

ARG GIT_AUTHOR_NAME=""
ARG GIT_AUTHOR_EMAIL=""

ENV _ZO_DATA_DIR={home}/{local_dir}/zoxide \\
    STARSHIP_CACHE={home}/{local_dir}/starship \\
    ATUIN_DB_PATH={home}/{local_dir}/atuin/history.db
"""

PROJECTS_STAGE = """FROM {previous} AS {stage}
"""

PROJECTS_FOOTER = """WORKDIR {home}/{projects_dir}

CMD $SHELL
"""

STAGE_SEPARATOR = "\n#############################################\n"


def render_step(step: BuildStep) -> str:
    """Render one plan step as a Dockerfile instruction."""
    lines = [f"# {step.name}"]
    if step.instruction != "RUN":
        lines.append(f"{step.instruction} " + " ".join(step.commands))
        return "\n".join(lines)

    body = " && \\\n    ".join(step.commands)
    if step.best_effort:
        body = f"({body}) || true"
    lines.append(f"RUN {body}")
    return "\n".join(lines)


def _render_steps(steps, username: str, current_user: str):
    """Render steps, switching USER when needed. Returns (text, last user)."""
    blocks = []
    for step in steps:
        if step.user != current_user:
            blocks.append(f"USER {'root' if step.user == ROOT else username}")
            current_user = step.user
        blocks.append(render_step(step))
    return "\n\n".join(blocks), current_user


def generate_dockerfile(plan: BuildPlan) -> str:
    """Generate Dockerfile from a resolved build plan."""
    config = plan.config
    values = {
        "name": config.name,
        "shell": config.shell.value,
        "home": config.home,
        "uid": config.host_uid,
        "gid": config.host_gid,
        "base_image": BASE_IMAGE,
        "cache_dir": CACHE_DIR,
        "local_dir": LOCAL_DIR,
        "projects_dir": PROJECTS_DIR,
    }

    sections = []

    # The base stage starts as root
    base = [BASE_STAGE.format(stage=STAGE_BASE, **values)]
    steps, user = _render_steps(plan.stage_steps(STAGE_BASE), config.username, ROOT)
    base.append(steps)
    base.append("")
    base.append(BASE_ENV.format(**values))
    sections.append("\n".join(base))

    tools = [TOOLS_STAGE.format(stage=STAGE_TOOLS, previous=STAGE_BASE, **values)]
    steps, user = _render_steps(plan.stage_steps(STAGE_TOOLS), config.username, user)
    tools.append(steps)
    sections.append("\n".join(tools))

    projects = [PROJECTS_STAGE.format(stage=STAGE_PROJECTS, previous=STAGE_TOOLS, **values)]
    steps, user = _render_steps(plan.stage_steps(STAGE_PROJECTS), config.username, user)
    projects.append(steps)
    projects.append("")
    projects.append(PROJECTS_FOOTER.format(**values))
    sections.append("\n".join(projects))

    return HEADER.format(**values) + "\n" + STAGE_SEPARATOR.join(sections)
