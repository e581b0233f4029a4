"""Generate command for creating default config."""

import logging
from pathlib import Path

import yaml

from ..errors import StorageError
from ..models import TodoxConfig
from ..repositories import FilesystemLineStore
from ..services.config_service import ConfigService
from ..utils import done_file_path
from .output import error, info, success

logger = logging.getLogger(__name__)

# Header comments for generated file
CONFIG_HEADER = """\
# todox configuration
#
# todo_files: todo.txt files to manage (the first one is the active file).
#   Each file gets a companion done file with `.done` before its extension,
#   e.g. todo.txt -> todo.done.txt
#
# capture_position: where new tasks go, `top` or `bottom`
#
# priorities: letters offered when setting a priority
#   - id: single uppercase letter A-Z
#   - label: display name

"""


def generate_config_yaml() -> str:
    """Generate YAML config from the default TodoxConfig model.

    Uses TodoxConfig.default() as the single source of truth, so the
    generated config always matches internal defaults.
    """
    config_dict = TodoxConfig.default().model_dump(mode="json")
    yaml_content = yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False)
    return CONFIG_HEADER + yaml_content


def run_generate(config_path: Path) -> int:
    """
    Generate the default configuration and the files it names.

    Args:
        config_path: Where todox.yml will be created

    Returns:
        Exit code (0 = success, 1 = nothing to do)
    """
    created = False

    if config_path.exists():
        info(f"Config exists: {config_path}")
        config_service = ConfigService(config_path)
        config = config_service.get_config()
        if config_service.has_config_error:
            error(config_service.config_error or f"Invalid config {config_path}")
            return 1
    else:
        config = TodoxConfig.default()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(generate_config_yaml(), encoding="utf-8")
        success(f"Generated config: {config_path}")
        created = True

    store = FilesystemLineStore()
    for todo_file in config.todo_files:
        for path in (todo_file, done_file_path(todo_file)):
            if path.exists():
                info(f"File exists: {path}")
                continue
            try:
                store.write_lines(path, [])
            except StorageError as e:
                error(str(e))
                return 1
            logger.info("Created empty collection %s", path)
            success(f"Created file: {path}")
            created = True

    if not created:
        print("Nothing to generate.")
        return 1

    return 0
