"""Location of the prompt library on disk."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

HOME_ENV_VAR = "PROMPTSHELF_HOME"
DEFAULT_HOME = Path.home() / ".config" / "promptshelf"
PROMPT_FILENAME = "prompt.json"


class ConfigPaths:
    def __init__(self, home: Path | None = None):
        if home is None:
            env_home = os.environ.get(HOME_ENV_VAR)
            home = Path(env_home).expanduser() if env_home else DEFAULT_HOME
        self.home = Path(home)

    @property
    def prompt_file(self) -> Path:
        return self.home / PROMPT_FILENAME

    @property
    def logs_dir(self) -> Path:
        return self.home / "logs"

    def ensure_config_directory(self) -> Path:
        """Create the base directory if needed and return it."""
        self.home.mkdir(parents=True, exist_ok=True)
        return self.home
