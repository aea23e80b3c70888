"""System prompt rendering"""

import json
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ..models.actions import ACTION_CATALOG
from .context import BoardContext

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class PromptRenderer:
    """Renders the system instructions from ``templates/system_prompt.md.j2``"""

    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.jinja = Environment(
            loader=FileSystemLoader(str(template_dir)),
            keep_trailing_newline=True,
        )

    def render(self, context: BoardContext) -> str:
        template = self.jinja.get_template("system_prompt.md.j2")
        actions = [
            {
                "type": action_type,
                "description": entry["description"],
                "example": json.dumps({"type": action_type, "payload": entry["payload"]}, indent=2),
            }
            for action_type, entry in ACTION_CATALOG.items()
        ]
        return template.render(
            board_json=context.board_json(),
            members_json=context.members_json(),
            current_user_id=context.current_user_id,
            actions=actions,
        )


def render_system_prompt(context: BoardContext) -> str:
    return PromptRenderer().render(context)
