"""
Flask CLI commands.
"""
import click

from gym_api.services import subscription_manager


def register_commands(app):
    """Attach the maintenance commands to ``app.cli``."""

    @app.cli.command('deactivate-expired')
    def deactivate_expired():
        """Clear the active flag on subscriptions past their end date."""
        count = subscription_manager().deactivate_expired()
        click.echo(f"Deactivated {count} expired subscription(s)")
