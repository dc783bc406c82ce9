"""Training session (one attendance record)."""
from datetime import datetime
from aktivlogg import db
from aktivlogg.models.base import BaseModel

class TrainingSession(BaseModel):
    """Attendance record created by a scan or by an admin."""

    __tablename__ = 'training_sessions'

    organization_id = db.Column(db.Integer, db.ForeignKey('organizations.id'), nullable=False, index=True)
    member_id = db.Column(db.Integer, db.ForeignKey('organization_members.id'), nullable=False, index=True)
    location_id = db.Column(db.Integer, db.ForeignKey('training_locations.id'), nullable=False)

    start_time = db.Column(db.DateTime, default=datetime.now, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=True)
    duration_minutes = db.Column(db.Integer, nullable=True)
    discipline = db.Column(db.String(10), nullable=True)

    # Verification details
    verified = db.Column(db.Boolean, default=False, nullable=False)
    verified_by = db.Column(db.String(255), nullable=True)
    verification_time = db.Column(db.DateTime, nullable=True)

    manual_entry = db.Column(db.Boolean, default=False, nullable=False)
    notes = db.Column(db.Text, nullable=True)

    def to_dict(self, exclude: list = None):
        """Convert to dictionary with display names."""
        data = super().to_dict(exclude=exclude)
        data['location_name'] = self.location.name if self.location else None
        data['member_name'] = self.member.full_name if self.member else None
        return data

    def __repr__(self):
        return f'<TrainingSession {self.id} member={self.member_id}>'
