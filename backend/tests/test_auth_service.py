"""Test identity resolution."""
import pytest

from aktivlogg import db
from aktivlogg.errors import AuthenticationRequiredError
from aktivlogg.models import MemberRole
from aktivlogg.services.auth_service import AuthService

def test_resolve_approved_member(club):
    identity = AuthService.resolve_member('user-officer', club.organization.id)

    assert identity.member_id == club.officer.id
    assert identity.organization_id == club.organization.id
    assert identity.role == MemberRole.RANGE_OFFICER
    assert identity.is_range_officer
    assert not identity.is_admin

def test_unapproved_member_is_refused(club):
    with pytest.raises(AuthenticationRequiredError):
        AuthService.resolve_member('user-pending', club.organization.id)

def test_member_of_other_organization_is_refused(club):
    with pytest.raises(AuthenticationRequiredError):
        AuthService.resolve_member('user-outsider', club.organization.id)

def test_inactive_organization_is_refused(club):
    club.organization.active = False
    db.session.commit()

    with pytest.raises(AuthenticationRequiredError):
        AuthService.resolve_member('user-member', club.organization.id)

@pytest.mark.parametrize('user_id, organization_id', [(None, 1), ('', 1), ('user-member', None)])
def test_missing_claims_are_refused(club, user_id, organization_id):
    with pytest.raises(AuthenticationRequiredError):
        AuthService.resolve_member(user_id, organization_id)

def test_issued_token_is_accepted(client, club):
    token = AuthService.issue_token(club.member)

    response = client.get('/api/training/sessions/mine',
        headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 200

def test_token_without_organization_claim(client, club):
    from flask_jwt_extended import create_access_token
    token = create_access_token(identity='user-member')

    response = client.get('/api/training/sessions/mine',
        headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 401
