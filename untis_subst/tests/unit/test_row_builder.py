import pytest

from untis_subst.core.errors import SchemaMismatchError
from untis_subst.core.row_builder import RowBuilder
from untis_subst.models.models import ParserConfig
from untis_subst.tests.html_helpers import make_row, make_table


def _builder(columns, **extra):
    return RowBuilder(ParserConfig.from_data({"columns": columns, **extra}))


def test_build_row_with_type_column():
    row = make_row("<td>3</td><td>M</td><td>Entfall</td><td>---</td>")
    built = _builder(["lesson", "subject", "type", "room"]).build(row)
    substitution = built.substitution
    assert substitution.lesson == "3"
    assert substitution.subject == "M"
    assert substitution.type == "Entfall"
    assert substitution.room is None
    assert substitution.color == "#F44336"
    assert built.skip_lines == 0


def test_build_row_without_lesson_yields_no_record():
    row = make_row("<td></td><td>M</td><td>Vertretung</td><td>B12</td>")
    assert _builder(["lesson", "subject", "type", "room"]).build(row).substitution is None


def test_build_row_strikethrough_subject():
    row = make_row("<td>2</td><td><s>Math</s>→Physics</td><td>MUE</td>")
    substitution = _builder(["lesson", "subject", "teacher"]).build(row).substitution
    assert substitution.previous_subject == "Math"
    assert substitution.subject == "Physics"
    assert substitution.type == "Vertretung"


def test_build_row_class_column_uses_class_regex():
    row = make_row("<td>Klasse 5a</td><td>1</td>")
    built = _builder(["class", "lesson"], classRegex=r"Klasse (\w+)").build(row)
    assert built.class_text == "5a"


def test_build_row_desc_type():
    row = make_row("<td>4</td><td>Stunde fällt aus</td>")
    substitution = _builder(["lesson", "desc-type"]).build(row).substitution
    assert substitution.desc == "Stunde fällt aus"
    assert substitution.type == "Entfall"


@pytest.mark.parametrize("columns, cells", [
    (["lesson", "type-entfall"], "<td>1</td><td>x</td>"),
    (["lesson", "type-entfall", "type"], "<td>1</td><td>x</td><td></td>"),
])
def test_build_row_cancellation_flag(columns, cells):
    assert _builder(columns).build(make_row(cells)).substitution.type == "Entfall"


def test_build_row_flag_does_not_override_type_column():
    row = make_row("<td>1</td><td>-</td><td>Raumänderung</td>")
    substitution = _builder(["lesson", "type-entfall", "type"]).build(row).substitution
    assert substitution.type == "Raumänderung"


def test_build_row_infers_cancellation_without_type_column():
    row = make_row("<td>2</td><td><strike>D</strike></td><td><strike>MUE</strike></td>")
    builder = _builder(["lesson", "subject", "teacher"])
    assert builder.build(row).substitution.type == "Entfall"
    assert builder.build(row, infer=False).substitution.type == "Vertretung"


def test_build_row_ignore_and_cross_reference_columns():
    row = make_row("<td>5</td><td>egal</td><td>Mo 3. Std</td><td>SCH</td>")
    substitution = _builder(["lesson", "ignore", "substitutionFrom", "teacherTo"]).build(row).substitution
    assert substitution.substitution_from == "Mo 3. Std"
    assert substitution.teacher_to == "SCH"
    assert substitution.desc is None


def test_build_row_merges_continuation_lines():
    table = make_table(
        '<tr class="list odd"><td>3</td><td>Aufgaben</td></tr>'
        '<tr class="list even"><td></td><td>im Heft</td></tr>'
    )
    built = _builder(["lesson", "desc"]).build(table.select_one("tr"))
    assert built.substitution.desc == "Aufgaben im Heft"
    assert built.skip_lines == 1


def test_build_row_with_too_many_cells_fails():
    row = make_row("<td>3</td><td>M</td><td>B12</td>")
    with pytest.raises(SchemaMismatchError, match="3 cells"):
        _builder(["lesson", "subject"]).build(row)


def test_build_row_with_fewer_cells_is_accepted():
    row = make_row("<td>3</td>")
    assert _builder(["lesson", "subject"]).build(row).substitution.lesson == "3"


def test_build_row_uses_configured_colors():
    row = make_row("<td>3</td><td>Entfall</td>")
    substitution = _builder(["lesson", "type"], colors={"Entfall": "#000000"}).build(row).substitution
    assert substitution.color == "#000000"


def test_build_row_placeholder_cell_is_skipped():
    row = make_row("<td>3</td><td>---</td><td>Entfall</td><td>B12</td>")
    substitution = _builder(["lesson", "subject", "type", "room"]).build(row).substitution
    assert substitution.lesson == "3"
    assert substitution.subject is None
    assert substitution.type == "Entfall"
    assert substitution.room == "B12"
