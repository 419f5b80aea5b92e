"""
pytest configuration for fieldsync engine tests.

Adds the repository root to sys.path so that
'from fieldsync.engine.xxx import ...' works without installing the package.
"""

import sys
from pathlib import Path

import pytest

# Ensure the repo root is on the path (fieldsync package lives at <root>/fieldsync/)
repo_root = Path(__file__).parent.parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


POSTS_MIGRATION = """\
<?php

use Illuminate\\Database\\Migrations\\Migration;
use Illuminate\\Database\\Schema\\Blueprint;
use Illuminate\\Support\\Facades\\Schema;

return new class extends Migration
{
    public function up(): void
    {
        Schema::create('posts', function (Blueprint $table) {
            $table->id();
            $table->string('title');
            $table->text('body')->nullable();
            $table->foreignId('author_id')->constrained('authors')->onDelete('cascade');
            $table->timestamps();
        });
    }

    public function down(): void
    {
        Schema::dropIfExists('posts');
    }
};
"""


def make_migration(table: str, columns: list[str]) -> str:
    """Build a minimal table-creating migration with the given column lines."""
    body = "\n".join(f"            {line}" for line in columns)
    return (
        "<?php\n\n"
        "return new class extends Migration\n{\n"
        "    public function up(): void\n    {\n"
        f"        Schema::create('{table}', function (Blueprint $table) {{\n"
        "            $table->id();\n"
        f"{body}\n"
        "            $table->timestamps();\n"
        "        });\n"
        "    }\n};\n"
    )


@pytest.fixture
def posts_migration() -> str:
    return POSTS_MIGRATION


@pytest.fixture
def project_root(tmp_path):
    """A minimal consuming project with .scaffold/ and an empty migrations dir."""
    (tmp_path / ".scaffold").mkdir()
    (tmp_path / "database" / "migrations").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def migration_text():
    """Factory fixture: migration_text(table, [column lines]) -> source."""
    return make_migration
