"""Render templates and write the generated TypeScript tree.

Takes the context from context_builder and produces:
  index.ts, config/api-config.ts, types/, api/<group>-api.ts, db/<group>-db.ts
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2

from .config import GeneratorConfig
from .context_builder import build_context
from .models import IntermediateRepresentation
from .seed import SeedData

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )


def render_files(context: dict[str, Any]) -> dict[str, str]:
    """Render every output file. Returns {relative path: content}."""
    env = _environment()
    files: dict[str, str] = {
        "index.ts": env.get_template("index.ts.j2").render(**context),
        "config/api-config.ts": env.get_template("api-config.ts.j2").render(**context),
        "types/index.ts": env.get_template("types-index.ts.j2").render(**context),
        "types/index.types.ts": env.get_template("types.ts.j2").render(**context),
        "api/index.ts": env.get_template("api-index.ts.j2").render(**context),
        "db/index.ts": env.get_template("db-index.ts.j2").render(**context),
        "db/db-setup.ts": env.get_template("db-setup.ts.j2").render(**context),
    }

    api_template = env.get_template("api.ts.j2")
    db_template = env.get_template("db.ts.j2")
    for group in context["groups"]:
        files[f"api/{group['slug']}-api.ts"] = api_template.render(group=group, **context)
        files[f"db/{group['slug']}-db.ts"] = db_template.render(group=group, **context)

    return files


def write_files(files: dict[str, str], output_dir: Path) -> list[Path]:
    """Write rendered files under output_dir, creating directories as needed."""
    written = []
    for relative, content in files.items():
        path = Path(output_dir) / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)
        written.append(path)
    return written


def generate(
    ir: IntermediateRepresentation,
    output_dir: Path,
    config: GeneratorConfig | None = None,
    seed: SeedData | None = None,
) -> list[Path]:
    """Render the full tree for an IR and write it to output_dir."""
    context = build_context(ir, config, seed)
    return write_files(render_files(context), output_dir)
