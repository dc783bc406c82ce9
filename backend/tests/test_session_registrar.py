"""Test location lookup and session registration."""
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from aktivlogg import db
from aktivlogg.errors import (
    DuplicateDayRegistrationError, LocationNotFoundError, RegistrationError
)
from aktivlogg.models import TrainingLocation, TrainingSession
from aktivlogg.services.session_registrar import SessionRegistrar, day_window

NOW = datetime(2024, 5, 14, 18, 30)

@pytest.fixture
def registrar():
    return SessionRegistrar(now=lambda: NOW)

def _session(club, member, start_time, location=None, verified=False):
    session = TrainingSession(
        organization_id=club.organization.id,
        member_id=member.id,
        location_id=(location or club.indoor).id,
        start_time=start_time,
        verified=verified
    )
    db.session.add(session)
    db.session.commit()
    return session

# =================== LOCATION LOOKUP ===================

def test_resolve_location_exact_match(club, registrar):
    location = registrar.resolve_location(club.organization.id, 'svpk-innendors-25m')
    assert location.id == club.indoor.id

def test_resolve_location_is_case_sensitive(club, registrar):
    with pytest.raises(LocationNotFoundError) as exc:
        registrar.resolve_location(club.organization.id, 'SVPK-INNENDORS-25M')
    assert exc.value.code == 'SVPK-INNENDORS-25M'

def test_resolve_location_ignores_inactive(club, registrar):
    with pytest.raises(LocationNotFoundError):
        registrar.resolve_location(club.organization.id, 'svpk-gammel')

def test_resolve_location_is_scoped_to_organization(club, registrar):
    with pytest.raises(LocationNotFoundError):
        registrar.resolve_location(club.organization.id, 'annen-bane')

# =================== REGISTRATION ===================

def test_register_session_creates_unverified_session(club, registrar):
    session = registrar.register_session(club.organization.id, club.member.id, club.indoor.id)

    assert session.id is not None
    assert session.verified is False
    assert session.manual_entry is False
    assert session.start_time == NOW
    assert session.discipline == 'NSF'
    assert TrainingSession.query.count() == 1

def test_register_session_uses_first_enabled_discipline(club, registrar):
    session = registrar.register_session(club.organization.id, club.member.id, club.outdoor.id)
    assert session.discipline == 'DFS'

def test_register_session_defaults_discipline_when_none_enabled(club, registrar):
    location = TrainingLocation(
        organization_id=club.organization.id, name='Felt', code='svpk-felt', nsf_enabled=False
    )
    db.session.add(location)
    db.session.commit()

    session = registrar.register_session(club.organization.id, club.member.id, location.id)
    assert session.discipline == 'NSF'

def test_second_session_same_day_is_rejected(club, registrar):
    _session(club, club.member, datetime(2024, 5, 14, 8, 15))

    with pytest.raises(DuplicateDayRegistrationError) as exc:
        registrar.register_session(club.organization.id, club.member.id, club.indoor.id)

    assert exc.value.existing_start == datetime(2024, 5, 14, 8, 15)
    assert TrainingSession.query.count() == 1

def test_same_day_rule_spans_locations(club, registrar):
    _session(club, club.member, datetime(2024, 5, 14, 9, 0), location=club.outdoor)

    with pytest.raises(DuplicateDayRegistrationError):
        registrar.register_session(club.organization.id, club.member.id, club.indoor.id)

def test_session_late_previous_day_does_not_block(club, registrar):
    _session(club, club.member, datetime(2024, 5, 13, 23, 59, 59))

    session = registrar.register_session(club.organization.id, club.member.id, club.indoor.id)
    assert session.start_time == NOW

def test_session_at_midnight_counts_for_the_new_day(club):
    _session(club, club.member, datetime(2024, 5, 15, 0, 0, 0))
    registrar = SessionRegistrar(now=lambda: datetime(2024, 5, 15, 12, 0))

    with pytest.raises(DuplicateDayRegistrationError):
        registrar.register_session(club.organization.id, club.member.id, club.indoor.id)

def test_other_members_are_not_affected(club, registrar):
    _session(club, club.second_member, datetime(2024, 5, 14, 8, 0))

    session = registrar.register_session(club.organization.id, club.member.id, club.indoor.id)
    assert session.member_id == club.member.id

@pytest.mark.parametrize('field', ['organization_id', 'member_id', 'location_id'])
def test_register_session_requires_all_ids(club, registrar, field):
    values = {
        'organization_id': club.organization.id,
        'member_id': club.member.id,
        'location_id': club.indoor.id,
    }
    values[field] = None

    with pytest.raises(ValueError):
        registrar.register_session(**values)

def test_storage_failure_raises_registration_error(club, registrar, monkeypatch):
    def failing_commit():
        raise SQLAlchemyError('database is locked')

    monkeypatch.setattr(db.session, 'commit', failing_commit)

    with pytest.raises(RegistrationError) as exc:
        registrar.register_session(club.organization.id, club.member.id, club.indoor.id)
    assert 'database is locked' in exc.value.reason

def test_day_window_is_half_open():
    start, end = day_window(datetime(2024, 5, 14, 18, 30).date())

    assert start == datetime(2024, 5, 14)
    assert end - start == timedelta(days=1)

# =================== ADMINISTRATION ===================

def test_manual_session_is_verified(club, registrar):
    session = registrar.add_manual_session(
        club.organization.id, club.member.id, club.indoor.id,
        start_time=datetime(2024, 5, 10, 17, 0),
        verified_by='user-admin',
        duration_minutes=90,
        notes='Glemte å skanne'
    )

    assert session.verified is True
    assert session.manual_entry is True
    assert session.verified_by == 'user-admin'
    assert session.verification_time == NOW
    assert session.end_time == datetime(2024, 5, 10, 18, 30)

def test_manual_session_respects_one_per_day(club, registrar):
    _session(club, club.member, datetime(2024, 5, 10, 12, 0))

    with pytest.raises(DuplicateDayRegistrationError):
        registrar.add_manual_session(
            club.organization.id, club.member.id, club.indoor.id,
            start_time=datetime(2024, 5, 10, 17, 0),
            verified_by='user-admin'
        )

def test_verify_session(club, registrar):
    session = _session(club, club.member, datetime(2024, 5, 14, 8, 0))

    registrar.verify_session(session, verified_by='user-officer')

    assert session.verified is True
    assert session.verified_by == 'user-officer'
    assert session.verification_time == NOW

def test_reject_session_deletes_it(club, registrar):
    session = _session(club, club.member, datetime(2024, 5, 14, 8, 0))

    registrar.reject_session(session)

    assert TrainingSession.query.count() == 0

def test_update_details_derives_duration(club, registrar):
    session = _session(club, club.member, datetime(2024, 5, 14, 8, 0))

    registrar.update_session_details(session, end_time=datetime(2024, 5, 14, 9, 45), notes='Presisjon')

    assert session.duration_minutes == 105
    assert session.notes == 'Presisjon'

def test_member_sessions_newest_first(club, registrar):
    _session(club, club.member, datetime(2024, 5, 1, 8, 0))
    _session(club, club.member, datetime(2024, 5, 3, 8, 0))
    _session(club, club.second_member, datetime(2024, 5, 2, 8, 0))

    sessions = SessionRegistrar.member_sessions(club.member.id)

    assert [s.start_time.day for s in sessions] == [3, 1]

def test_organization_sessions_pending_only(club, registrar):
    _session(club, club.member, datetime(2024, 5, 1, 8, 0), verified=True)
    pending = _session(club, club.second_member, datetime(2024, 5, 2, 8, 0))

    assert len(SessionRegistrar.organization_sessions(club.organization.id)) == 2
    assert [s.id for s in SessionRegistrar.organization_sessions(
        club.organization.id, pending_only=True)] == [pending.id]

def test_changing_end_time_recomputes_duration(club, registrar):
    session = _session(club, club.member, datetime(2024, 5, 14, 10, 0))
    registrar.update_session_details(session, end_time=datetime(2024, 5, 14, 11, 0))
    assert session.duration_minutes == 60

    registrar.update_session_details(session, end_time=datetime(2024, 5, 14, 10, 30))

    assert session.duration_minutes == 30

def test_explicit_duration_is_kept(club, registrar):
    session = _session(club, club.member, datetime(2024, 5, 14, 10, 0))

    registrar.update_session_details(
        session, end_time=datetime(2024, 5, 14, 11, 0), duration_minutes=45
    )

    assert session.duration_minutes == 45
