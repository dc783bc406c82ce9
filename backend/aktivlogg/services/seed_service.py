"""Database seeding service for demo data."""
from aktivlogg import db
from aktivlogg.models.organization import MemberRole, Organization, OrganizationMember
from aktivlogg.models.training_location import TrainingLocation

DEMO_ORGANIZATION = ('Svelvik Pistolklubb', 'svpk')

DEMO_LOCATIONS = [
    ('Innendørs 25m', 'svpk-innendors-25m', True, False, False),
    ('Utendørs 25m', 'svpk-utendors-25m', True, True, False),
]

DEMO_MEMBERS = [
    ('demo-admin', 'Kari Nordmann', '1001', 'kari@example.no', MemberRole.ADMIN),
    ('demo-officer', 'Ola Hansen', '1002', 'ola@example.no', MemberRole.RANGE_OFFICER),
    ('demo-member', 'Per Olsen', '1003', 'per@example.no', MemberRole.MEMBER),
]

class SeedService:
    """Service to seed the database with a demo club."""

    @staticmethod
    def seed_all() -> Organization:
        """Seed all demo data; existing rows are left untouched."""
        organization = SeedService.seed_organization()
        SeedService.seed_locations(organization)
        SeedService.seed_members(organization)
        db.session.commit()
        return organization

    @staticmethod
    def seed_organization() -> Organization:
        name, slug = DEMO_ORGANIZATION
        organization = Organization.query.filter_by(slug=slug).first()
        if organization is None:
            organization = Organization(name=name, slug=slug, active=True)
            db.session.add(organization)
            db.session.flush()
        return organization

    @staticmethod
    def seed_locations(organization: Organization) -> None:
        for name, code, nsf, dfs, dssn in DEMO_LOCATIONS:
            exists = TrainingLocation.query.filter_by(
                organization_id=organization.id, code=code
            ).first()
            if exists:
                continue
            db.session.add(TrainingLocation(
                organization_id=organization.id,
                name=name,
                code=code,
                nsf_enabled=nsf,
                dfs_enabled=dfs,
                dssn_enabled=dssn
            ))

    @staticmethod
    def seed_members(organization: Organization) -> None:
        for user_id, full_name, member_number, email, role in DEMO_MEMBERS:
            exists = OrganizationMember.query.filter_by(
                organization_id=organization.id, user_id=user_id
            ).first()
            if exists:
                continue
            db.session.add(OrganizationMember(
                organization_id=organization.id,
                user_id=user_id,
                full_name=full_name,
                member_number=member_number,
                email=email,
                role=role,
                approved=True
            ))
