"""Runtime settings from the environment and an optional .env file.

Priority: real env var > .env value > default. The .env file is looked up
in the working directory first, then at the project root.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = PROJECT_ROOT / 'data'

# Default palette (user provided originals)
DEFAULT_PALETTE: Dict[str, str] = {
    'KANBAN_PRIMARY': '#476EAE',
    'KANBAN_TODO': '#48B3AF',
    'KANBAN_INPROGRESS': '#F6FF99',
    'KANBAN_DONE': '#A7E399',
}


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    alt_screen: bool
    log_level: str
    log_file: Optional[Path]
    palette: Dict[str, str]
    force_color: bool
    no_color: bool


def truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def valid_hex(value: Optional[str]) -> Optional[str]:
    """Normalize '#RRGGBB' / 'RRGGBB' to '#RRGGBB'; None when malformed."""
    if not value:
        return None
    h = value.strip().lstrip('#')
    if len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h):
        return '#' + h.upper()
    return None


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    if env_file is not None:
        load_dotenv(dotenv_path=env_file, override=False)
    else:
        for candidate in (Path.cwd() / '.env', PROJECT_ROOT / '.env'):
            if candidate.exists():
                load_dotenv(dotenv_path=candidate, override=False)
                break

    data_dir = Path(os.environ.get('KANBAN_DATA_DIR') or DEFAULT_DATA_DIR).expanduser()
    log_file = os.environ.get('KANBAN_LOG_FILE')
    palette = {
        key: valid_hex(os.environ.get(key)) or default
        for key, default in DEFAULT_PALETTE.items()
    }
    return Settings(
        data_dir=data_dir,
        alt_screen=truthy_env(os.environ.get('KANBAN_ALT_SCREEN'), True),
        log_level=(os.environ.get('KANBAN_LOG_LEVEL') or 'WARNING').upper(),
        log_file=Path(log_file).expanduser() if log_file else None,
        palette=palette,
        force_color=os.environ.get('FORCE_COLOR', '').lower() in {'1', 'true', 'yes', 'on'},
        no_color=os.environ.get('NO_COLOR') is not None,
    )
