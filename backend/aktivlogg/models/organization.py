"""Organization and membership models."""
from enum import Enum
from aktivlogg import db
from aktivlogg.models.base import BaseModel

class MemberRole(Enum):
    """Member roles within an organization."""
    MEMBER = 'member'
    RANGE_OFFICER = 'range_officer'
    ADMIN = 'admin'

class Organization(BaseModel):
    """A shooting club (tenant)."""

    __tablename__ = 'organizations'

    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(50), unique=True, nullable=False, index=True)
    active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    members = db.relationship('OrganizationMember', backref='organization', lazy='dynamic')
    locations = db.relationship('TrainingLocation', backref='organization', lazy='dynamic')

    def __repr__(self) -> str:
        return f'<Organization {self.slug}>'

class OrganizationMember(BaseModel):
    """Membership of an externally authenticated user in an organization."""

    __tablename__ = 'organization_members'
    __table_args__ = (
        db.UniqueConstraint('organization_id', 'user_id', name='uq_member_org_user'),
    )

    organization_id = db.Column(db.Integer, db.ForeignKey('organizations.id'), nullable=False, index=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)  # token subject
    full_name = db.Column(db.String(255), nullable=False)
    member_number = db.Column(db.String(50), nullable=True)
    email = db.Column(db.String(255), nullable=True)

    role = db.Column(db.Enum(MemberRole), nullable=False, default=MemberRole.MEMBER)
    approved = db.Column(db.Boolean, default=False, nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    training_sessions = db.relationship('TrainingSession', backref='member', lazy='dynamic')

    def can_act(self) -> bool:
        """Check if the member may register or manage training."""
        return self.approved and self.active

    def __repr__(self) -> str:
        return f'<OrganizationMember {self.full_name}>'
