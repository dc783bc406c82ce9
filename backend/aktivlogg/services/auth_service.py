"""Identity of the calling organization member."""
from dataclasses import dataclass
from typing import Optional

from flask import current_app
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity

from aktivlogg.errors import AuthenticationRequiredError
from aktivlogg.models.organization import OrganizationMember, MemberRole

@dataclass(frozen=True)
class IdentityContext:
    """Authenticated member acting within one organization."""
    organization_id: int
    member_id: int
    user_id: str
    full_name: str
    role: MemberRole

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN

    @property
    def is_range_officer(self) -> bool:
        return self.role in (MemberRole.RANGE_OFFICER, MemberRole.ADMIN)

    @classmethod
    def from_member(cls, member: OrganizationMember) -> 'IdentityContext':
        return cls(
            organization_id=member.organization_id,
            member_id=member.id,
            user_id=member.user_id,
            full_name=member.full_name,
            role=member.role
        )

class AuthService:
    """Resolve identities from tokens issued by the external auth service."""

    @staticmethod
    def resolve_member(user_id: Optional[str], organization_id: Optional[int]) -> IdentityContext:
        """Look up an approved, active membership; fail closed otherwise."""
        if not user_id or organization_id is None:
            raise AuthenticationRequiredError()

        member = OrganizationMember.query.filter_by(
            user_id=str(user_id),
            organization_id=organization_id
        ).first()

        if member is None or not member.can_act() or not member.organization.active:
            raise AuthenticationRequiredError()

        return IdentityContext.from_member(member)

    @staticmethod
    def current_identity() -> IdentityContext:
        """Identity for the current request (requires a verified JWT)."""
        claim = current_app.config.get('JWT_ORGANIZATION_CLAIM', 'organization_id')
        organization_id = get_jwt().get(claim)
        try:
            organization_id = int(organization_id) if organization_id is not None else None
        except (TypeError, ValueError):
            raise AuthenticationRequiredError()

        return AuthService.resolve_member(get_jwt_identity(), organization_id)

    @staticmethod
    def issue_token(member: OrganizationMember) -> str:
        """Create a development token shaped like the external issuer's."""
        claim = current_app.config.get('JWT_ORGANIZATION_CLAIM', 'organization_id')
        return create_access_token(
            identity=member.user_id,
            additional_claims={claim: member.organization_id}
        )
