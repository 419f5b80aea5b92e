#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Artifact Templates

Jinja2 templates for the files the scaffolder writes. Placeholders use the
{{ name }} form and are filled by render_template(). The environment uses
StrictUndefined, so a placeholder without a value is an error instead of an
empty string. Autoescaping is off: the output is PHP source, not HTML.
"""

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

from .models import TemplateError

_ENV = Environment(
    loader=BaseLoader(),
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def render_template(template: str, values: dict[str, str]) -> str:
    """
    Render a template string with the given placeholder values.

    Raises:
        TemplateError: if a placeholder has no value or the template is malformed
    """
    try:
        return _ENV.from_string(template).render(values)
    except (TemplateSyntaxError, UndefinedError) as exc:
        raise TemplateError(f"Failed to render template: {exc}") from exc


# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------

MIGRATION_TEMPLATE = r"""<?php

use Illuminate\Database\Migrations\Migration;
use Illuminate\Database\Schema\Blueprint;
use Illuminate\Support\Facades\Schema;

return new class extends Migration
{
    public function up(): void
    {
{{ up }}
    }

    public function down(): void
    {
{{ down }}
    }
};
"""


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

MODEL_TEMPLATE = r"""<?php

namespace {{ namespace }};

use Illuminate\Database\Eloquent\Factories\HasFactory;
use Illuminate\Database\Eloquent\Model;
{{ imports }}
class {{ class_name }} extends Model
{
    use {{ traits }};

    protected $fillable = [{{ fillable }}];
{{ relationships }}}
"""

BELONGS_TO_TEMPLATE = r"""
    public function {{ method }}()
    {
        return $this->belongsTo({{ related }}::class, '{{ foreign_key }}');
    }
"""

HAS_MANY_TEMPLATE = r"""    public function {{ method }}()
    {
        return $this->hasMany({{ related }}::class);
    }"""


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

CONTROLLER_TEMPLATE = r"""<?php

namespace {{ namespace }};

use {{ modelNamespace }}\{{ model }};
use Illuminate\Http\Request;

class {{ controller }} extends Controller
{
    public function index()
    {
        return {{ model }}::paginate();
    }

    public function store(Request $request)
    {
        $validated = $request->validate($this->rules());

        return {{ model }}::create($validated);
    }

    public function show({{ model }} ${{ modelVar }})
    {
        return ${{ modelVar }};
    }

    public function update(Request $request, {{ model }} ${{ modelVar }})
    {
        ${{ modelVar }}->update($request->validate($this->rules()));

        return ${{ modelVar }};
    }

    public function destroy({{ model }} ${{ modelVar }})
    {
        ${{ modelVar }}->delete();

        return response()->noContent();
    }

    protected function rules(): array
    {
        return [
{{ validation_rules }}
        ];
    }
}
"""


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

ROUTE_TEMPLATE = r"""Route::resource('{{ route }}', \{{ controllerNamespace }}\{{ controller }}::class)->except(['create', 'edit']);"""
