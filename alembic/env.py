"""
Entorno de Alembic: usa la URL de la configuración de la app y la
metadata de todos los modelos.
"""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from app.core.config import settings
from app.database.database import Base
from app.modules.auth import models as _auth  # noqa: F401
from app.modules.company import models as _company  # noqa: F401
from app.modules.currencies import models as _currencies  # noqa: F401
from app.modules.units import models as _units  # noqa: F401
from app.modules.departments import models as _departments  # noqa: F401
from app.modules.products import models as _products  # noqa: F401
from app.modules.inventory_adjustments import models as _adjustments  # noqa: F401
from app.modules.contacts import models as _contacts  # noqa: F401
from app.modules.banks import models as _banks  # noqa: F401
from app.modules.expenses import models as _expenses  # noqa: F401
from app.modules.pos import models as _pos  # noqa: F401
from app.modules.invoices import models as _invoices  # noqa: F401
from app.modules.purchases import models as _purchases  # noqa: F401
from app.modules.returns import models as _returns  # noqa: F401
from app.modules.hr import models as _hr  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
