"""
Tests for cli/cli.py

Validates:
- make writes artifacts from --fields and prints diagnostics and suggestions
- make without --fields on a non-interactive stdin exits 1 and writes nothing
- make prompts for fields line by line on a TTY
- make --dry-run prints the planned files only
- sync scaffolds, reports in dry run, and exits 1 on a missing directory
- sync --watch exits 0 on Ctrl+C and rejects a poll interval below one
- extract prints the recovered table name and canonical field-spec
"""

import io

import pytest

from fieldsync.cli import cli
from fieldsync.engine.watch import PollingWatcher


def run_cli(*argv) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(list(argv))
    return exc_info.value.code


class FakeTTY(io.StringIO):
    def isatty(self):
        return True


@pytest.fixture
def non_interactive(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))


# ---------------------------------------------------------------------------
# make
# ---------------------------------------------------------------------------


def test_make_with_fields(project_root, capsys):
    code = run_cli(
        "--project-root", str(project_root),
        "make", "post", "--fields", "title:string, author_id:foreign, bogus",
    )
    out, err = capsys.readouterr()

    assert code == 0
    assert (project_root / "app" / "Models" / "Post.php").exists()
    assert (project_root / "app" / "Http" / "Controllers" / "PostController.php").exists()
    assert "Scaffolded Post:" in out
    assert "public function posts()" in out
    assert "Invalid field format: bogus" in err


def test_make_without_fields_non_interactive_fails(project_root, capsys, non_interactive):
    code = run_cli("--project-root", str(project_root), "make", "Post")
    _, err = capsys.readouterr()

    assert code == 1
    assert "non-interactive" in err
    assert not (project_root / "app").exists()


def test_make_with_only_invalid_fields_fails(project_root, capsys):
    code = run_cli("--project-root", str(project_root), "make", "Post", "--fields", "price:money")
    _, err = capsys.readouterr()
    assert code == 1
    assert "No valid fields" in err


def test_make_interactive_prompt(project_root, capsys, monkeypatch):
    answers = iter(["title:string", "age:number", "", "body:text:nullable", "done"])
    monkeypatch.setattr("sys.stdin", FakeTTY(""))
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    code = run_cli("--project-root", str(project_root), "make", "Post", "--dry-run")
    out, _ = capsys.readouterr()

    assert code == 0
    assert "Unsupported type 'number'" in out
    assert "Would scaffold Post: title:string,body:text:nullable" in out


def test_prompt_for_fields_stops_at_end_of_input(capsys):
    lines = iter(["title:string"])

    def read_line(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    fields = cli.prompt_for_fields(read_line)
    assert [f.name for f in fields] == ["title"]


def test_make_dry_run_writes_nothing(project_root, capsys):
    code = run_cli(
        "--project-root", str(project_root),
        "make", "Post", "--fields", "title:string", "--dry-run",
    )
    out, _ = capsys.readouterr()

    assert code == 0
    assert "Schema::create('posts'" in out
    assert not (project_root / "app").exists()


# ---------------------------------------------------------------------------
# sync
# ---------------------------------------------------------------------------


@pytest.fixture
def project_with_migrations(project_root, migration_text):
    migrations = project_root / "database" / "migrations"
    (migrations / "2024_01_01_000000_create_authors_table.php").write_text(
        migration_text("authors", ["$table->string('name');"])
    )
    (migrations / "2024_01_02_000000_create_posts_table.php").write_text(
        migration_text("posts", ["$table->string('title');"])
    )
    models = project_root / "app" / "Models"
    models.mkdir(parents=True)
    (models / "Author.php").write_text("<?php\n")
    return project_root


def test_sync_scaffolds_missing_models(project_with_migrations, capsys):
    code = run_cli("--project-root", str(project_with_migrations), "sync")
    out, _ = capsys.readouterr()

    assert code == 0
    assert "Found 2 table-creating migration(s)." in out
    assert "Scaffolded: Post" in out
    assert "Scaffolded: Author" not in out
    assert (project_with_migrations / "app" / "Models" / "Post.php").exists()
    assert (project_with_migrations / "app" / "Models" / "Author.php").read_text() == "<?php\n"


def test_sync_dry_run(project_with_migrations, capsys):
    code = run_cli("--project-root", str(project_with_migrations), "sync", "--dry-run")
    out, _ = capsys.readouterr()

    assert code == 0
    assert "Would scaffold: Post" in out
    assert "Fields: title:string" in out
    assert "Dry run complete. No changes made." in out
    assert not (project_with_migrations / "app" / "Models" / "Post.php").exists()


def test_sync_missing_directory(tmp_path, capsys):
    code = run_cli("--project-root", str(tmp_path), "sync")
    _, err = capsys.readouterr()
    assert code == 1
    assert "Migrations directory not found" in err


def test_sync_empty_directory(project_root, capsys):
    code = run_cli("--project-root", str(project_root), "sync")
    out, _ = capsys.readouterr()
    assert code == 0
    assert "No table-creating migrations found." in out


def test_sync_watch_interrupt_exits_zero(project_root, capsys, monkeypatch):
    def interrupted(self, max_cycles=None):
        raise KeyboardInterrupt

    monkeypatch.setattr(PollingWatcher, "run", interrupted)
    code = run_cli("--project-root", str(project_root), "sync", "--watch")
    out, _ = capsys.readouterr()

    assert code == 0
    assert "Watching" in out
    assert "Stopped watching." in out


def test_sync_watch_rejects_zero_poll(project_root, capsys):
    code = run_cli("--project-root", str(project_root), "sync", "--watch", "--poll", "0")
    _, err = capsys.readouterr()
    assert code == 1
    assert "at least 1 second" in err


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------


def test_extract_prints_field_spec(tmp_path, posts_migration, capsys):
    path = tmp_path / "2024_01_01_000000_create_posts_table.php"
    path.write_text(posts_migration)

    code = run_cli("extract", str(path))
    out, _ = capsys.readouterr()

    assert code == 0
    assert "Table : posts" in out
    assert "Fields: title:string,body:text:nullable,author_id:foreign:constrained:onDelete(cascade)" in out


def test_extract_without_create(tmp_path, capsys):
    path = tmp_path / "2024_01_01_000000_add_column.php"
    path.write_text("<?php\nSchema::table('posts', function ($table) {});\n")
    assert run_cli("extract", str(path)) == 1


def test_extract_missing_file(tmp_path, capsys):
    assert run_cli("extract", str(tmp_path / "nope.php")) == 1
    assert "file not found" in capsys.readouterr().err
