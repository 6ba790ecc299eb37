import pytest

from cli import CLI


class Script:
    """Feeds canned answers to the CLI prompts; EOF once exhausted."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt=""):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def make_cli(store, storage, plain_theme):
    def _make(*answers):
        return CLI(store, storage, plain_theme, alt_screen=False, input_func=Script(*answers))
    return _make


def test_inline_add_uses_defaults(make_cli, store):
    cli = make_cli()
    msg = cli.handle_command("add   Write the report  ")
    task = store.all_tasks()[0]
    assert task.title == "Write the report"
    assert task.priority == "medium"
    assert task.column_id == "todo"
    assert "Added" in msg


def test_interactive_add(make_cli, store):
    cli = make_cli("  Plan  ", "quarterly", "h", "ip")
    cli.handle_command("add")
    task = store.all_tasks()[0]
    assert (task.title, task.description, task.priority, task.column_id) == \
        ("Plan", "quarterly", "high", "in-progress")


def test_interactive_add_blank_title_is_reported(make_cli, store):
    cli = make_cli("   ")
    assert cli.handle_command("add") == "Title required."
    assert len(store) == 0


def test_add_with_bad_priority_adds_nothing(make_cli, store):
    cli = make_cli("Plan", "", "urgent")
    assert "Invalid priority" in cli.handle_command("add")
    assert len(store) == 0


def test_edit_keeps_blank_answers(make_cli, store):
    task = store.add("Old", "desc", "low")
    cli = make_cli("New", "", "", "d")
    cli.handle_command(f"edit {task.id[:6]}")
    updated = store.get(task.id)
    assert (updated.title, updated.description, updated.priority, updated.column_id) == \
        ("New", "desc", "low", "done")
    assert updated.created_at == task.created_at


def test_edit_dash_clears_description(make_cli, store):
    task = store.add("Card", "desc")
    cli = make_cli("", "-", "", "")
    cli.handle_command(f"edit {task.id}")
    assert store.get(task.id).description == ""


def test_edit_without_changes(make_cli, store):
    task = store.add("Card")
    calls = []
    store.subscribe(calls.append)
    cli = make_cli("", "", "", "")
    assert cli.handle_command(f"edit {task.id}") == "No changes."
    assert calls == []


def test_mv_with_aliases_and_errors(make_cli, store):
    task = store.add("Card")
    cli = make_cli()
    assert cli.handle_command(f"mv {task.id} ip") is None
    assert store.get(task.id).column_id == "in-progress"
    assert cli.handle_command(f"mv {task.id} later") == "Invalid column: later."
    assert "not found" in cli.handle_command("mv zzz d")
    assert cli.handle_command("mv x").startswith("Usage")


def test_pick_and_drop(make_cli, store):
    task = store.add("Card")
    cli = make_cli()
    assert cli.handle_command("drop d") == "Nothing picked up."
    assert "Holding" in cli.handle_command(f"pick {task.id}")
    assert cli.drag.picked_up_task_id == task.id
    cli.handle_command("drop d")
    assert store.get(task.id).column_id == "done"
    assert not cli.drag.is_holding


def test_drop_on_unknown_column_releases(make_cli, store):
    task = store.add("Card")
    cli = make_cli()
    cli.handle_command(f"pick {task.id}")
    assert "Invalid column" in cli.handle_command("drop attic")
    assert not cli.drag.is_holding


def test_rm_requires_confirmation(make_cli, store):
    task = store.add("Card")
    cli = make_cli("n", "y")
    assert cli.handle_command(f"rm {task.id}") == "Delete cancelled."
    assert len(store) == 1
    assert "removed" in cli.handle_command(f"rm {task.id}")
    assert len(store) == 0


def test_dark_toggles_and_saves(make_cli, storage):
    cli = make_cli()
    assert cli.handle_command("dark") == "Dark mode on."
    assert storage.load_preference() is True
    assert cli.handle_command("dark") == "Dark mode off."
    assert storage.load_preference() is False


def test_unknown_command(make_cli):
    assert "Unknown command" in make_cli().handle_command("frobnicate")


def test_run_session_saves_on_exit(make_cli, store, storage, capsys):
    cli = make_cli("add Write spec", "", "help", "", "exit")
    cli.run()
    out = capsys.readouterr().out
    assert "Commands:" in out
    assert "Write spec" in out
    assert out.rstrip().endswith("Goodbye.")
    assert [t.title for t in storage.load_tasks()] == ["Write spec"]


def test_run_handles_eof(make_cli, capsys):
    make_cli().run()
    assert "Interrupted. Goodbye." in capsys.readouterr().out


class BrokenStorage:
    def save(self, tasks):
        raise OSError("disk full")

    def save_preference(self, flag):
        raise OSError("disk full")


def test_failed_exit_save_still_restores_terminal(store, plain_theme, capsys):
    cli = CLI(store, BrokenStorage(), plain_theme, alt_screen=True, input_func=Script("exit"))
    with pytest.raises(OSError):
        cli.run()
    out = capsys.readouterr().out
    assert out.count("\033[?1049l") == 1
    assert out.rstrip().endswith("Goodbye.")


def test_drop_accepts_column_aliases(make_cli, store):
    task = store.add("Card")
    cli = make_cli()
    cli.handle_command(f"pick {task.id}")
    assert cli.handle_command("drop IP") is None
    assert store.get(task.id).column_id == "in-progress"
    cli.handle_command(f"pick {task.id}")
    assert cli.handle_command("drop In-Progress") is None
    cli.handle_command(f"pick {task.id}")
    cli.handle_command("drop doing")
    assert store.get(task.id).column_id == "in-progress"
