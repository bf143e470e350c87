"""HRMS CLI tool (hrmsctl)."""

import typer

app = typer.Typer(name="hrmsctl", help="HRMS CLI")
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")


def _mysql_params():
    """Split a mysql+pymysql URL into connection params and database name."""
    from sqlalchemy.engine import make_url
    from hrms.core.config import settings

    url = make_url(settings.DATABASE_URL)
    params = {
        "host": url.host or "localhost",
        "port": url.port or 3306,
        "user": url.username,
        "password": url.password or "",
    }
    return params, url.database


@db_app.command("create")
def db_create():
    """Create the MySQL database if it doesn't exist."""
    import pymysql

    params, db_name = _mysql_params()
    conn = pymysql.connect(**params)
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
    import hrms.models  # noqa: F401
    from hrms.db.base import Base
    from hrms.db.session import engine

    Base.metadata.create_all(bind=engine)
    typer.echo("✅ Tables created")


@db_app.command("seed")
def db_seed():
    """Seed permissions, menus, predefined roles, and the super-admin."""
    from hrms.db.session import SessionLocal
    from hrms.db.seeds.seed_permissions import seed_permissions
    from hrms.db.seeds.seed_roles import seed_roles
    from hrms.db.seeds.seed_super_admin import seed_super_admin

    db = SessionLocal()
    try:
        seed_permissions(db)
        seed_roles(db)
        seed_super_admin(db)
    finally:
        db.close()
    typer.echo("✅ All seeds applied")


@db_app.command("reset")
def db_reset():
    """Drop and recreate the database (DANGER)."""
    confirm = typer.confirm("⚠️  This will DROP the entire database. Continue?")
    if not confirm:
        raise typer.Abort()
    import pymysql

    params, db_name = _mysql_params()
    conn = pymysql.connect(**params)
    try:
        cursor = conn.cursor()
        cursor.execute(f"DROP DATABASE IF EXISTS `{db_name}`")
        cursor.execute(f"CREATE DATABASE `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
        typer.echo(f"✅ Database '{db_name}' reset")
    finally:
        conn.close()


@app.command("permissions")
def show_permissions(
    user_id: int = typer.Argument(..., help="User ID to inspect"),
):
    """Print the effective permissions of a user, read straight from the database."""
    from hrms.db.session import SessionLocal
    from hrms.services.permission_resolver import permission_resolver

    db = SessionLocal()
    try:
        permissions = permission_resolver.resolve(db, user_id)
    finally:
        db.close()
    if not permissions:
        typer.echo(f"User {user_id} holds no permissions (unknown user?)")
        return
    for name in sorted(permissions):
        typer.echo(f"  {name}")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(True, help="Auto-reload"),
):
    """Start the FastAPI development server."""
    import uvicorn
    uvicorn.run("hrms.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
