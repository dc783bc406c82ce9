"""Flask CLI commands."""
import threading

import click
from flask import current_app

from aktivlogg import db
from aktivlogg.errors import AuthenticationRequiredError

def register_cli(app):
    """Register CLI commands on the application."""

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables')
    def init_db(drop):
        """Initialize the database."""
        if drop:
            db.drop_all()
            click.echo('Dropped all tables.')

        db.create_all()
        click.echo('Created all tables.')

    @app.cli.command('seed-db')
    def seed_db():
        """Seed database with a demo club, locations and members."""
        from aktivlogg.services.seed_service import SeedService

        try:
            organization = SeedService.seed_all()
            click.echo(f'Database seeded successfully! Organization: {organization.slug}')
        except Exception as e:
            db.session.rollback()
            raise click.ClickException(f'Error seeding database: {str(e)}')

    @app.cli.command('issue-token')
    @click.argument('organization_slug')
    @click.argument('user_id')
    def issue_token(organization_slug, user_id):
        """Print a development access token for a member."""
        from aktivlogg.models.organization import Organization, OrganizationMember
        from aktivlogg.services.auth_service import AuthService

        organization = Organization.query.filter_by(slug=organization_slug).first()
        if organization is None:
            raise click.ClickException(f'Unknown organization: {organization_slug}')

        member = OrganizationMember.query.filter_by(
            organization_id=organization.id, user_id=user_id
        ).first()
        if member is None:
            raise click.ClickException(f'Unknown member: {user_id}')

        click.echo(AuthService.issue_token(member))

    @app.cli.command('scan')
    @click.argument('organization_slug')
    @click.argument('user_id')
    @click.option('--camera', type=int, default=None, help='Camera index (default from config)')
    @click.option('--code', default=None, help='Register this code instead of using the camera')
    def scan(organization_slug, user_id, camera, code):
        """Run the scan workflow for a member at a kiosk."""
        from aktivlogg.models.organization import Organization
        from aktivlogg.services.auth_service import AuthService
        from aktivlogg.services.decoder import OpenCVDecoder
        from aktivlogg.services.scan_workflow import ScanState, ScanWorkflowController, WorkflowSettings
        from aktivlogg.services.session_registrar import SessionRegistrar

        organization = Organization.query.filter_by(slug=organization_slug).first()
        try:
            identity = AuthService.resolve_member(user_id, organization.id if organization else None)
        except AuthenticationRequiredError:
            identity = None

        camera_index = camera if camera is not None else current_app.config.get('CAMERA_INDEX', 0)
        done = threading.Event()

        def show(view):
            line = f'[{view.state.value}]'
            if view.banner:
                line += f' {view.banner}'
            if view.modal_message:
                line += f' {view.modal_message}'
            if view.session:
                line += f" {view.session.get('location_name')} {view.session.get('start_time')}"
            click.echo(line)

        def navigate(target):
            click.echo(f'-> {target}')
            done.set()

        controller = ScanWorkflowController(
            registrar=SessionRegistrar(default_discipline=current_app.config.get('DEFAULT_DISCIPLINE', 'NSF')),
            decoder_factory=lambda: OpenCVDecoder(camera_index),
            identity=identity,
            settings=WorkflowSettings.from_config(current_app.config),
            navigate=navigate,
            listener=show
        )

        # a code-only run never falls back to the camera after an error
        final_states = {ScanState.IDLE, ScanState.ERROR} if code is not None else {ScanState.IDLE}

        try:
            if code is not None:
                controller.submit_code(code)
            elif not controller.start():
                return

            while not done.is_set() and controller.state not in final_states:
                controller.pump(timeout=0.1)
        except KeyboardInterrupt:
            controller.cancel()
        finally:
            controller.close()

        if code is not None and controller.state == ScanState.ERROR:
            raise click.ClickException(controller.view.banner or 'Scan failed')
