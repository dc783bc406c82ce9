"""Location lookup and training session creation."""
import logging
from datetime import datetime, timedelta, date
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from aktivlogg import db
from aktivlogg.errors import (
    DuplicateDayRegistrationError, LocationNotFoundError, RegistrationError
)
from aktivlogg.models.training_location import TrainingLocation
from aktivlogg.models.training_session import TrainingSession

logger = logging.getLogger(__name__)

def day_window(day: date) -> Tuple[datetime, datetime]:
    """Half-open [start, end) range covering one calendar day."""
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)

class SessionRegistrar:
    """
    Resolves scanned codes to locations and creates training sessions.

    The one-session-per-member-per-day rule is checked with a single query
    right before the insert. There is no transaction spanning both, so two
    truly concurrent scans can both pass; such doubles are corrected by an
    administrator.
    """

    def __init__(self, now: Callable[[], datetime] = datetime.now, default_discipline: str = 'NSF'):
        self.now = now
        self.default_discipline = default_discipline

    # =================== SCAN REGISTRATION ===================

    def resolve_location(self, organization_id: int, code: str) -> TrainingLocation:
        """Find the active location in the organization with exactly this code."""
        location = TrainingLocation.query.filter(
            TrainingLocation.organization_id == organization_id,
            TrainingLocation.code == code,
            TrainingLocation.active.is_(True)
        ).first()

        if location is None:
            logger.info('No active location for code %r in organization %s', code, organization_id)
            raise LocationNotFoundError(code)

        return location

    def register_session(self, organization_id: int, member_id: int, location_id: int) -> TrainingSession:
        """Create an unverified session unless the member already trained today."""
        self._require(organization_id=organization_id, member_id=member_id, location_id=location_id)

        now = self.now()
        existing = self.session_on_day(member_id, now.date())
        if existing is not None:
            logger.info('Member %s already registered at %s', member_id, existing.start_time)
            raise DuplicateDayRegistrationError(existing.start_time)

        location = db.session.get(TrainingLocation, location_id)
        disciplines = location.enabled_disciplines() if location else []

        session = TrainingSession(
            organization_id=organization_id,
            member_id=member_id,
            location_id=location_id,
            start_time=now,
            discipline=disciplines[0] if disciplines else self.default_discipline,
            verified=False,
            manual_entry=False
        )
        self._commit(session)

        logger.info('Training session %s created for member %s at location %s',
                    session.id, member_id, location_id)
        return session

    def session_on_day(self, member_id: int, day: date) -> Optional[TrainingSession]:
        """Return the member's session starting on the given day, if any."""
        start, end = day_window(day)
        try:
            return TrainingSession.query.filter(
                TrainingSession.member_id == member_id,
                TrainingSession.start_time >= start,
                TrainingSession.start_time < end
            ).order_by(TrainingSession.start_time.asc()).first()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise RegistrationError(str(e)) from e

    # =================== ADMINISTRATION ===================

    def add_manual_session(
        self,
        organization_id: int,
        member_id: int,
        location_id: int,
        start_time: datetime,
        verified_by: str,
        duration_minutes: int = None,
        notes: str = None
    ) -> TrainingSession:
        """Record a session on behalf of a member; admin entries are verified."""
        self._require(organization_id=organization_id, member_id=member_id, location_id=location_id)

        existing = self.session_on_day(member_id, start_time.date())
        if existing is not None:
            raise DuplicateDayRegistrationError(existing.start_time)

        end_time = start_time + timedelta(minutes=duration_minutes) if duration_minutes else None
        session = TrainingSession(
            organization_id=organization_id,
            member_id=member_id,
            location_id=location_id,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=duration_minutes,
            notes=notes,
            manual_entry=True,
            verified=True,
            verified_by=verified_by,
            verification_time=self.now()
        )
        self._commit(session)
        return session

    def verify_session(self, session: TrainingSession, verified_by: str) -> TrainingSession:
        """Approve a pending session."""
        session.verified = True
        session.verified_by = verified_by
        session.verification_time = self.now()
        self._commit(session)
        logger.info('Training session %s verified by %s', session.id, verified_by)
        return session

    def reject_session(self, session: TrainingSession) -> None:
        """Remove a pending session."""
        try:
            db.session.delete(session)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise RegistrationError(str(e)) from e

    def update_session_details(self, session: TrainingSession, **details) -> TrainingSession:
        """Update notes, end time or duration of a session."""
        for key in ('notes', 'end_time', 'duration_minutes'):
            if key in details:
                setattr(session, key, details[key])

        # an explicit duration wins; otherwise it follows the end time
        end_time_changed = 'end_time' in details and 'duration_minutes' not in details
        if session.end_time is not None and (end_time_changed or session.duration_minutes is None):
            session.duration_minutes = int((session.end_time - session.start_time).total_seconds() // 60)

        self._commit(session)
        return session

    # =================== QUERIES ===================

    @staticmethod
    def member_sessions(member_id: int) -> List[TrainingSession]:
        """Training log for one member, newest first."""
        return TrainingSession.query.filter_by(member_id=member_id).order_by(
            TrainingSession.start_time.desc()
        ).all()

    @staticmethod
    def organization_sessions(organization_id: int, pending_only: bool = False) -> List[TrainingSession]:
        query = TrainingSession.query.filter_by(organization_id=organization_id)
        if pending_only:
            query = query.filter(TrainingSession.verified.is_(False))
        return query.order_by(TrainingSession.start_time.desc()).all()

    # =================== HELPERS ===================

    @staticmethod
    def _require(**values) -> None:
        for name, value in values.items():
            if value is None or value == '':
                raise ValueError(f"{name} is required")

    @staticmethod
    def _commit(session: TrainingSession) -> None:
        try:
            db.session.add(session)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error('Error storing training session: %s', e)
            raise RegistrationError(str(e)) from e
