"""Management commands for the VetCare backend application."""

from __future__ import annotations

import logging
from typing import Optional

import click

from vetcare.db.base import Profile
from vetcare.db.session import SessionLocal, create_tables
from vetcare.main import create_app

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

# Create the Flask application once so commands can share configuration.
app = create_app()


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("init_db")
def init_db() -> None:
    """Create all tables for the configured DATABASE_URL."""
    with app.app_context():
        create_tables()
    logging.info("Database tables created.")


@cli.command("seed_demo")
def seed_demo() -> None:
    """Insert the demo clinic (vet, client, pet, appointments, sale)."""
    from vetcare.db.seed import seed_demo_data

    with app.app_context():
        create_tables()
        inserted = seed_demo_data()
    logging.info("Demo data ready (%s row(s) inserted).", inserted)


@cli.command("set_role")
@click.option("--email", required=True, help="Email of the profile to update.")
@click.option(
    "--role",
    type=click.Choice(["client", "vet", "admin"]),
    required=True,
    help="Role to assign.",
)
def set_role(email: str, role: Optional[str]) -> None:
    """Change the role of an existing profile."""
    with app.app_context():
        session = SessionLocal()
        try:
            profile = session.query(Profile).filter(Profile.email == email).first()
            if profile is None:
                raise click.ClickException(f"No profile found with email '{email}'.")

            if profile.role == role:
                logging.info("Profile %s already has role %s. No changes made.", email, role)
                return

            profile.role = role
            session.commit()
            logging.info("Set role of %s (id=%s) to %s.", email, profile.id, role)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


if __name__ == "__main__":
    cli()
