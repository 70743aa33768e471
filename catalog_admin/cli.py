"""Catalog Admin CLI tool (catalogctl)."""

import typer
from sqlalchemy.engine import make_url

app = typer.Typer(name="catalogctl", help="Catalog Admin CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


def _server_connection():
    """Open a pymysql connection to the server in DATABASE_URL, without selecting the database."""
    import pymysql
    from catalog_admin.core.config import settings

    url = make_url(settings.DATABASE_URL)
    conn = pymysql.connect(
        host=url.host or "localhost",
        port=url.port or 3306,
        user=url.username,
        password=url.password or "",
    )
    return conn, url.database


@db_app.command("create")
def db_create():
    """Create the MySQL database if it doesn't exist."""
    conn, db_name = _server_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
        typer.echo(f"✅ Database '{db_name}' created (or already exists)")
    finally:
        conn.close()


@db_app.command("init")
def db_init():
    """Create all tables."""
    from catalog_admin.db.base import Base
    from catalog_admin.db.session import engine
    import catalog_admin.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Tables created")


@db_app.command("seed")
def db_seed(
    sample: bool = typer.Option(True, help="Also seed sample companies and products"),
):
    """Seed roles, super-admin, and sample data."""
    from catalog_admin.db.session import SessionLocal
    from catalog_admin.db.seeds.seed_roles import seed_roles
    from catalog_admin.db.seeds.seed_super_admin import seed_super_admin
    from catalog_admin.db.seeds.seed_sample_data import seed_sample_data

    db = SessionLocal()
    try:
        seed_roles(db)
        seed_super_admin(db)
        if sample:
            seed_sample_data(db)
    finally:
        db.close()
    typer.echo("✅ All seeds applied")


@db_app.command("reset")
def db_reset():
    """Drop and recreate the database (DANGER)."""
    confirm = typer.confirm("⚠️  This will DROP the entire database. Continue?")
    if not confirm:
        raise typer.Abort()

    conn, db_name = _server_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(f"DROP DATABASE IF EXISTS `{db_name}`")
        cursor.execute(f"CREATE DATABASE `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
        typer.echo(f"✅ Database '{db_name}' reset")
    finally:
        conn.close()


@app.command("roles")
def list_roles():
    """List roles with their level, permissions and visible pages."""
    from catalog_admin.core.authorization import visible_pages
    from catalog_admin.db.session import SessionLocal
    from catalog_admin.services.role_service import role_service

    db = SessionLocal()
    try:
        for record in role_service.list_records(db):
            marker = "system" if record.is_system else "custom"
            typer.echo(f"  [{record.id}] {record.name} (level {record.level}, {marker})")
            typer.echo(f"      permissions: {', '.join(sorted(record.permissions)) or '-'}")
            typer.echo(f"      pages: {', '.join(p.path for p in visible_pages(record)) or '-'}")
    finally:
        db.close()


@app.command("pages")
def list_pages():
    """Print the dashboard page registry."""
    from catalog_admin.core.pages import pages_by_category

    for category, pages in pages_by_category().items():
        typer.echo(category)
        for page in pages:
            typer.echo(f"  {page.path:<16} {page.name}")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(True, help="Auto-reload"),
):
    """Start the FastAPI development server."""
    import uvicorn
    uvicorn.run("catalog_admin.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
