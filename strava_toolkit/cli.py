import logging
from datetime import datetime, timezone

import click

from strava_toolkit.auth import (
    OAuth2Config,
    StaticTokenProvider,
    token_provider_from_authorization_code,
    token_provider_from_refresh_token,
)
from strava_toolkit.clients.strava import StravaClient
from strava_toolkit.config import Config
from strava_toolkit.exceptions import StravaError
from strava_toolkit.logger import get_logger
from strava_toolkit.models import TimeFilter, new_pagination


def _oauth_config():
    if not Config.STRAVA_CLIENT_ID or not Config.STRAVA_CLIENT_SECRET:
        click.echo("Error: STRAVA_CLIENT_ID and STRAVA_CLIENT_SECRET must be set", err=True)
        raise click.Abort()
    return OAuth2Config(
        client_id=Config.STRAVA_CLIENT_ID,
        client_secret=Config.STRAVA_CLIENT_SECRET,
        token_url=Config.STRAVA_TOKEN_ENDPOINT,
    )


def _token_provider():
    """Pick a token provider from the configured credentials."""
    if Config.STRAVA_ACCESS_TOKEN:
        return StaticTokenProvider(Config.STRAVA_ACCESS_TOKEN)
    if Config.STRAVA_REFRESH_TOKEN:
        return token_provider_from_refresh_token(_oauth_config(), Config.STRAVA_REFRESH_TOKEN)

    click.echo("Error: set STRAVA_ACCESS_TOKEN or STRAVA_REFRESH_TOKEN", err=True)
    raise click.Abort()


def _parse_date(value):
    if value is None:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').replace(tzinfo=timezone.utc)
    except ValueError:
        click.echo("Error: Invalid date format. Use YYYY-MM-DD", err=True)
        raise click.Abort()


def _format_total(label, total):
    return (
        f"  {label:<12} {total.count:>5} activities  "
        f"{total.distance / 1000:>9.1f} km  "
        f"{total.moving_time / 3600:>7.1f} h  "
        f"{total.elevation_gain:>8.0f} m"
    )


@click.group()
@click.option('--debug', is_flag=True, help='Log outgoing requests')
@click.pass_context
def cli(ctx, debug):
    """Command-line access to the Strava API."""
    ctx.ensure_object(dict)
    logger = get_logger('strava_toolkit')
    if debug:
        logger.setLevel(logging.DEBUG)


@cli.command()
def athlete():
    """Show the authorized athlete."""
    with StravaClient(_token_provider()) as client:
        try:
            result = client.fetch_authorized_athlete()
        except StravaError as e:
            click.echo(f"Error: {e}", err=True)
            raise click.Abort()

    name = " ".join(part for part in (result.firstname, result.lastname) if part)
    click.echo(f"{result.id} {name}".rstrip())


@cli.command()
@click.option('--before', help='Only activities before this date (YYYY-MM-DD)')
@click.option('--after', help='Only activities after this date (YYYY-MM-DD)')
@click.option('--page', default=0, type=int, help='Page number')
@click.option('--per-page', default=0, type=int, help='Activities per page')
def activities(before, after, page, per_page):
    """List the athlete's activities."""
    time_filter = None
    if before or after:
        time_filter = TimeFilter(before=_parse_date(before), after=_parse_date(after))

    with StravaClient(_token_provider()) as client:
        try:
            result = client.list_athlete_activities(time_filter, new_pagination(page, per_page))
        except StravaError as e:
            click.echo(f"Error: {e}", err=True)
            raise click.Abort()

    if not result:
        click.echo("No activities found.")
        return

    for activity in result:
        started = activity.start_date_local.strftime('%Y-%m-%d %H:%M') if activity.start_date_local else '-'
        click.echo(
            f"{activity.id:<12} {started:<16} {activity.sport_type:<16} "
            f"{activity.distance / 1000:>7.2f} km  {activity.name}"
        )


@cli.command()
@click.option('--athlete-id', type=int, help='Athlete id (looked up if omitted)')
def stats(athlete_id):
    """Show recent, year-to-date and all-time totals."""
    with StravaClient(_token_provider()) as client:
        if athlete_id:
            client.set_athlete_id(athlete_id)
        try:
            result = client.fetch_athlete_stats()
        except StravaError as e:
            click.echo(f"Error: {e}", err=True)
            raise click.Abort()

    for sport in ('ride', 'run', 'swim'):
        click.echo(f"\n{sport.capitalize()}:")
        click.echo(_format_total('Recent', getattr(result, f'recent_{sport}_totals')))
        click.echo(_format_total('Year to date', getattr(result, f'ytd_{sport}_totals')))
        click.echo(_format_total('All time', getattr(result, f'all_{sport}_totals')))


@cli.command()
@click.option('--code', required=True, help='Authorization code from the OAuth redirect')
def authorize(code):
    """Exchange an authorization code for a refresh token."""
    try:
        provider = token_provider_from_authorization_code(_oauth_config(), code)
    except StravaError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()

    click.echo("✓ Authorization successful. Save this refresh token:")
    click.echo(f"STRAVA_REFRESH_TOKEN={provider.refresh_token}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
