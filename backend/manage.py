import os

import click
from flask.cli import with_appcontext
from flask_migrate import upgrade, migrate, init

from schoolhub import create_app
from schoolhub.config import config
from schoolhub.seed import seed_data

app = create_app(config[os.getenv("FLASK_ENV", "default")])


@app.cli.command("db-init")
@with_appcontext
def db_init():
    """Initializes migrations directory"""
    init()


@app.cli.command("db-migrate")
@with_appcontext
def db_migrate():
    """Creates a new migration"""
    migrate()


@app.cli.command("db-upgrade")
@with_appcontext
def db_upgrade():
    """Applies migrations"""
    upgrade()


@app.cli.command("seed")
@click.option("--reset", is_flag=True, help="Drop and recreate all tables first.")
@with_appcontext
def seed(reset):
    """Loads demo schools, users, a classroom and a reading paragraph"""
    credentials = seed_data(reset=reset)
    for role, registration_id in credentials.items():
        click.echo(f"{role}: {registration_id}")
