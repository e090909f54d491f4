#!/usr/bin/env python3
"""
Migraciones de base de datos de Zenith ERP (Alembic).

    python migrate.py create "agregar tabla de gastos"
    python migrate.py upgrade [revision]
    python migrate.py downgrade [revision]
    python migrate.py stamp head
    python migrate.py history | current
"""
import argparse
import sys
from pathlib import Path

root_dir = Path(__file__).resolve().parent
sys.path.insert(0, str(root_dir))

from alembic import command
from alembic.config import Config

from app.core.config import settings


def get_alembic_config() -> Config:
    alembic_cfg = Config(str(root_dir / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(root_dir / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    return alembic_cfg


def create_migration(cfg: Config, message: str):
    command.revision(cfg, autogenerate=True, message=message)
    print(f"Migración creada: {message}")


def upgrade(cfg: Config, revision: str = "head"):
    command.upgrade(cfg, revision)
    print(f"Base de datos actualizada a {revision}")


def downgrade(cfg: Config, revision: str = "-1"):
    command.downgrade(cfg, revision)
    print(f"Base de datos revertida a {revision}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Migraciones de Zenith ERP")
    actions = parser.add_subparsers(dest="action", required=True)

    create = actions.add_parser("create", help="Crear migración autogenerada")
    create.add_argument("message")

    up = actions.add_parser("upgrade", help="Aplicar migraciones pendientes")
    up.add_argument("revision", nargs="?", default="head")

    down = actions.add_parser("downgrade", help="Revertir migraciones")
    down.add_argument("revision", nargs="?", default="-1")

    stamp = actions.add_parser("stamp", help="Marcar la revisión sin ejecutar migraciones")
    stamp.add_argument("revision", nargs="?", default="head")

    actions.add_parser("history", help="Historial de migraciones")
    actions.add_parser("current", help="Revisión actual de la base de datos")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    cfg = get_alembic_config()

    if args.action == "create":
        create_migration(cfg, args.message)
    elif args.action == "upgrade":
        upgrade(cfg, args.revision)
    elif args.action == "downgrade":
        downgrade(cfg, args.revision)
    elif args.action == "stamp":
        command.stamp(cfg, args.revision)
    elif args.action == "history":
        command.history(cfg)
    elif args.action == "current":
        command.current(cfg)


if __name__ == "__main__":
    main()
