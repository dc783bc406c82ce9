"""Models package with all models."""
from .base import BaseModel
from .organization import Organization, OrganizationMember, MemberRole
from .training_location import TrainingLocation
from .training_session import TrainingSession

__all__ = [
    'BaseModel', 'Organization', 'OrganizationMember', 'MemberRole',
    'TrainingLocation', 'TrainingSession'
]
