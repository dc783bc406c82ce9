"""Training Location Management API."""
import logging

from flask import Blueprint, current_app, g, request
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import IntegrityError

from aktivlogg import db
from aktivlogg.models.organization import Organization
from aktivlogg.models.training_location import TrainingLocation
from aktivlogg.services.qr_service import QRService
from aktivlogg.utils.decorators import admin_required, member_required
from aktivlogg.utils.helpers import error_response, success_response
from aktivlogg.utils.validators import Validator

logger = logging.getLogger(__name__)

locations_bp = Blueprint('locations', __name__)

UPDATABLE_FIELDS = ['name', 'code', 'description', 'active', 'nsf_enabled', 'dfs_enabled', 'dssn_enabled']

FIELD_TYPES = {
    'name': str,
    'code': str,
    'description': str,
    'active': bool,
    'nsf_enabled': bool,
    'dfs_enabled': bool,
    'dssn_enabled': bool,
}

def _organization_location(location_id: int):
    location = db.session.get(TrainingLocation, location_id)
    if location is None or location.organization_id != g.identity.organization_id:
        return None
    return location

@locations_bp.route('', methods=['GET'])
@jwt_required()
@member_required
def get_locations():
    """Locations of the caller's organization."""
    try:
        query = TrainingLocation.query.filter_by(organization_id=g.identity.organization_id)

        include_inactive = request.args.get('include_inactive', 'false').lower() == 'true'
        if not (include_inactive and g.identity.is_admin):
            query = query.filter_by(active=True)

        locations = query.order_by(TrainingLocation.name.asc()).all()
        return success_response(data=[location.to_dict() for location in locations])

    except Exception as e:
        return error_response(f"Error fetching locations: {str(e)}", 500)

@locations_bp.route('', methods=['POST'])
@jwt_required()
@admin_required
def create_location():
    """Create a location; the code is generated unless one is supplied."""
    data = request.get_json(silent=True) or {}

    check = Validator.validate_types(data, FIELD_TYPES)
    if not check['is_valid']:
        return error_response(check['errors'][0], 400)

    check = Validator.validate_name(data.get('name'))
    if not check['is_valid']:
        return error_response(check['errors'][0], 400)

    organization = db.session.get(Organization, g.identity.organization_id)
    code = (data.get('code') or '').strip() or QRService.generate_location_code(
        organization.slug,
        data['name'],
        current_app.config.get('LOCATION_CODE_SUFFIX_LENGTH', 6)
    )

    try:
        location = TrainingLocation(
            organization_id=organization.id,
            name=data['name'].strip(),
            code=code,
            description=data.get('description'),
            active=data.get('active', True),
            nsf_enabled=data.get('nsf_enabled', True),
            dfs_enabled=data.get('dfs_enabled', False),
            dssn_enabled=data.get('dssn_enabled', False)
        )
        db.session.add(location)
        db.session.commit()

    except IntegrityError:
        db.session.rollback()
        return error_response(f"Location code {code} already exists", 409)
    except Exception as e:
        db.session.rollback()
        return error_response(f"Error creating location: {str(e)}", 500)

    logger.info('Location %s created with code %s', location.id, location.code)
    return success_response(
        data=location.to_dict(),
        message="Location created successfully"
    ), 201

@locations_bp.route('/<int:location_id>', methods=['PUT'])
@jwt_required()
@admin_required
def update_location(location_id):
    """Update location information."""
    location = _organization_location(location_id)
    if location is None:
        return error_response("Training location not found", 404)

    data = request.get_json(silent=True) or {}

    check = Validator.validate_types(data, FIELD_TYPES)
    if not check['is_valid']:
        return error_response(check['errors'][0], 400)

    if 'name' in data:
        check = Validator.validate_name(data['name'])
        if not check['is_valid']:
            return error_response(check['errors'][0], 400)
    if 'code' in data and not (data['code'] or '').strip():
        return error_response("code cannot be empty", 400)

    try:
        for field in UPDATABLE_FIELDS:
            if field in data:
                value = data[field].strip() if field in ('name', 'code') else data[field]
                setattr(location, field, value)

        db.session.commit()

    except IntegrityError:
        db.session.rollback()
        return error_response(f"Location code {data.get('code')} already exists", 409)
    except Exception as e:
        db.session.rollback()
        return error_response(f"Error updating location: {str(e)}", 500)

    return success_response(
        data=location.to_dict(),
        message="Location updated successfully"
    )

@locations_bp.route('/<int:location_id>', methods=['DELETE'])
@jwt_required()
@admin_required
def deactivate_location(location_id):
    """Deactivate location (soft delete)."""
    location = _organization_location(location_id)
    if location is None:
        return error_response("Training location not found", 404)

    try:
        location.active = False
        db.session.commit()
        return success_response(message="Location deactivated successfully")

    except Exception as e:
        db.session.rollback()
        return error_response(f"Error deactivating location: {str(e)}", 500)

@locations_bp.route('/<int:location_id>/qr', methods=['GET'])
@jwt_required()
@admin_required
def location_qr(location_id):
    """QR code image for the location's scanner deep link."""
    location = _organization_location(location_id)
    if location is None:
        return error_response("Training location not found", 404)

    try:
        link = QRService.build_scanner_link(current_app.config['SCANNER_BASE_URL'], location.code)
        return success_response(data={
            'location_id': location.id,
            'code': location.code,
            'scanner_url': link,
            'qr_code': QRService.generate_qr_image(link)
        })

    except Exception as e:
        return error_response(f"Error generating QR code: {str(e)}", 500)
