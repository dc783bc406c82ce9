"""Shared pytest fixtures."""
from types import SimpleNamespace

import pytest
from flask_jwt_extended import create_access_token

from aktivlogg import create_app, db
from aktivlogg.models import (
    MemberRole, Organization, OrganizationMember, TrainingLocation
)

@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()

def _member(organization, user_id, name, role=MemberRole.MEMBER, approved=True, active=True):
    member = OrganizationMember(
        organization_id=organization.id,
        user_id=user_id,
        full_name=name,
        role=role,
        approved=approved,
        active=active
    )
    db.session.add(member)
    return member

@pytest.fixture
def club(app):
    """Demo club with members and locations, plus a second club."""
    organization = Organization(name='Svelvik Pistolklubb', slug='svpk')
    other = Organization(name='Annen Klubb', slug='annen')
    db.session.add_all([organization, other])
    db.session.flush()

    data = SimpleNamespace(organization=organization, other_organization=other)
    data.admin = _member(organization, 'user-admin', 'Kari Nordmann', MemberRole.ADMIN)
    data.officer = _member(organization, 'user-officer', 'Ola Hansen', MemberRole.RANGE_OFFICER)
    data.member = _member(organization, 'user-member', 'Per Olsen')
    data.second_member = _member(organization, 'user-member-2', 'Anne Berg')
    data.pending_member = _member(organization, 'user-pending', 'Nils Ny', approved=False)
    data.outsider = _member(other, 'user-outsider', 'Eva Annen', MemberRole.ADMIN)

    data.indoor = TrainingLocation(
        organization_id=organization.id, name='Innendørs 25m', code='svpk-innendors-25m'
    )
    data.outdoor = TrainingLocation(
        organization_id=organization.id, name='Utendørs 25m', code='svpk-utendors-25m',
        nsf_enabled=False, dfs_enabled=True
    )
    data.closed = TrainingLocation(
        organization_id=organization.id, name='Gammel bane', code='svpk-gammel', active=False
    )
    data.foreign = TrainingLocation(
        organization_id=other.id, name='Annen bane', code='annen-bane'
    )
    db.session.add_all([data.indoor, data.outdoor, data.closed, data.foreign])
    db.session.commit()
    return data

@pytest.fixture
def auth_headers(app):
    """Build bearer headers shaped like the external issuer's tokens."""
    def _headers(member, language=None):
        token = create_access_token(
            identity=member.user_id,
            additional_claims={'organization_id': member.organization_id}
        )
        headers = {'Authorization': f'Bearer {token}'}
        if language:
            headers['Accept-Language'] = language
        return headers
    return _headers
