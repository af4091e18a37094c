from locadora.services import ObligationService
from tests.helpers import DAY, NOW


def test_overdue_command_lists_past_due(app, owner, make_equipment, make_rental):
    late = make_rental([{"equipment_id": make_equipment("Mixer").id, "quantity": 1}], end_at=NOW - DAY)
    make_rental([{"equipment_id": make_equipment("Drill").id, "quantity": 1}], end_at=NOW + DAY)
    obligation = ObligationService.list_for_rental(owner.id, late.id)[0]

    result = app.test_cli_runner().invoke(args=["obligations", "overdue", "--owner-email", "ana@example.com"])

    assert result.exit_code == 0
    assert obligation.id in result.output
    assert "1 overdue obligation(s)." in result.output


def test_overdue_command_with_nothing_due(app, owner):
    result = app.test_cli_runner().invoke(args=["obligations", "overdue", "--owner-email", "ana@example.com"])

    assert result.exit_code == 0
    assert "No overdue obligations." in result.output


def test_overdue_command_unknown_account(app):
    result = app.test_cli_runner().invoke(args=["obligations", "overdue", "--owner-email", "nobody@example.com"])

    assert result.exit_code != 0
    assert "No account registered" in result.output
