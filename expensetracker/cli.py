import logging

import click

from .extensions import db
from .models import Category, User

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Food", "#ff7043"),
    ("Transportation", "#42a5f5"),
    ("Housing", "#8d6e63"),
    ("Utilities", "#ffca28"),
    ("Entertainment", "#ab47bc"),
    ("Healthcare", "#ef5350"),
    ("Shopping", "#66bb6a"),
    ("Other", "#00b8d4"),
]

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "password123"


def seed_default_categories():
    """Add any missing default category; returns how many were created."""
    existing = {c.name.lower() for c in Category.query.all()}
    created = 0
    for name, color in DEFAULT_CATEGORIES:
        if name.lower() not in existing:
            db.session.add(Category(name=name, color=color))
            created += 1
    if created:
        db.session.commit()
        logger.info("Seeded %d default categories", created)
    return created


def seed_demo_user():
    """Create the demo account if missing; returns the user or None."""
    if User.query.filter_by(email=DEMO_EMAIL).first():
        return None
    user = User(name="Demo User", email=DEMO_EMAIL)
    user.set_password(DEMO_PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user


def register_commands(app):
    @app.cli.command("seed-categories")
    def seed_categories_command():
        """Seed the default global categories."""
        created = seed_default_categories()
        click.echo(f"{created} categories created.")

    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Create the demo user account."""
        if seed_demo_user() is None:
            click.echo("Demo user already exists.")
            return
        click.echo("Demo user created successfully.")
        click.echo(f"Email: {DEMO_EMAIL}")
        click.echo(f"Password: {DEMO_PASSWORD}")
