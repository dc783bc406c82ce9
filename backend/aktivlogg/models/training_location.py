"""Training location (range/station) identified by a QR code."""
from typing import Dict, List
from aktivlogg import db
from aktivlogg.models.base import BaseModel

class TrainingLocation(BaseModel):
    """A physical range or station within an organization."""

    __tablename__ = 'training_locations'
    __table_args__ = (
        db.UniqueConstraint('organization_id', 'code', name='uq_location_org_code'),
    )

    organization_id = db.Column(db.Integer, db.ForeignKey('organizations.id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    code = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    active = db.Column(db.Boolean, default=True, nullable=False)

    # Disciplines offered at this location
    nsf_enabled = db.Column(db.Boolean, default=True, nullable=False)
    dfs_enabled = db.Column(db.Boolean, default=False, nullable=False)
    dssn_enabled = db.Column(db.Boolean, default=False, nullable=False)

    # Relationships
    training_sessions = db.relationship('TrainingSession', backref='location', lazy='dynamic')

    def enabled_disciplines(self) -> List[str]:
        """Disciplines in priority order."""
        disciplines = []
        if self.nsf_enabled:
            disciplines.append('NSF')
        if self.dfs_enabled:
            disciplines.append('DFS')
        if self.dssn_enabled:
            disciplines.append('DSSN')
        return disciplines

    def to_dict(self, exclude: list = None) -> Dict:
        data = super().to_dict(exclude=exclude)
        data['disciplines'] = self.enabled_disciplines()
        return data

    def __repr__(self) -> str:
        return f'<TrainingLocation {self.code}>'
