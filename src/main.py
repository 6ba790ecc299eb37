"""Main entry point for the terminal kanban board."""
import logging
from pathlib import Path
from typing import Optional

import click

from board import TaskStore
from cli import CLI
from config import load_settings
from drag import DragController
from logging_utils import configure_logging
from storage import FileSlots, Storage
from theme import Theme

logger = logging.getLogger(__name__)


@click.command()
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Directory holding the saved board (default: KANBAN_DATA_DIR or ./data).')
@click.option('--alt-screen/--no-alt-screen', default=None,
              help="Use the terminal's alternate screen (default: KANBAN_ALT_SCREEN).")
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Log level (default: KANBAN_LOG_LEVEL or WARNING).')
def main(data_dir: Optional[Path], alt_screen: Optional[bool], log_level: Optional[str]) -> None:
    """Interactive kanban board in the terminal."""
    settings = load_settings()
    data_dir = data_dir or settings.data_dir
    configure_logging(log_level or settings.log_level, settings.log_file or data_dir / 'kanban.log')

    storage = Storage(FileSlots(data_dir))
    tasks, dark = storage.load()
    logger.info("starting with %d task(s) from %s", len(tasks), data_dir)
    store = TaskStore(tasks)
    store.subscribe(storage.save)

    cli = CLI(
        store,
        storage,
        Theme.from_settings(settings, dark=dark),
        drag=DragController(store),
        alt_screen=settings.alt_screen if alt_screen is None else alt_screen,
    )
    cli.run()


if __name__ == "__main__":
    main()
