"""Test CLI commands."""
from aktivlogg.models import Organization, OrganizationMember, TrainingLocation, TrainingSession

def test_seed_db_is_idempotent(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['seed-db'])
    assert result.exit_code == 0
    assert 'svpk' in result.output

    runner.invoke(args=['seed-db'])
    assert Organization.query.count() == 1
    assert TrainingLocation.query.count() == 2
    assert OrganizationMember.query.count() == 3

def test_issue_token(app):
    runner = app.test_cli_runner()
    runner.invoke(args=['seed-db'])

    result = runner.invoke(args=['issue-token', 'svpk', 'demo-member'])

    assert result.exit_code == 0
    assert result.output.count('.') == 2

def test_issue_token_unknown_member(app):
    runner = app.test_cli_runner()
    runner.invoke(args=['seed-db'])

    result = runner.invoke(args=['issue-token', 'svpk', 'nobody'])
    assert result.exit_code != 0

def test_scan_with_code(app):
    runner = app.test_cli_runner()
    runner.invoke(args=['seed-db'])
    app.config['SUCCESS_REDIRECT_MS'] = 0

    result = runner.invoke(args=['scan', 'svpk', 'demo-member', '--code', 'svpk-innendors-25m'])

    assert result.exit_code == 0
    assert '[success]' in result.output
    assert '-> /log' in result.output
    assert TrainingSession.query.count() == 1

def test_scan_without_membership(app):
    runner = app.test_cli_runner()
    runner.invoke(args=['seed-db'])

    result = runner.invoke(args=['scan', 'svpk', 'nobody', '--code', 'svpk-innendors-25m'])

    assert 'logget inn' in result.output
    assert TrainingSession.query.count() == 0

def test_scan_with_unknown_code_does_not_open_camera(app, monkeypatch):
    from aktivlogg.services.decoder import OpenCVDecoder

    started = []
    monkeypatch.setattr(OpenCVDecoder, 'start', lambda self, on_decode: started.append(self))

    runner = app.test_cli_runner()
    runner.invoke(args=['seed-db'])

    result = runner.invoke(args=['scan', 'svpk', 'demo-member', '--code', 'ukjent-kode'])

    assert result.exit_code != 0
    assert '[error]' in result.output
    assert started == []
    assert TrainingSession.query.count() == 0
