from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import create_engine, pool

# settings read DATABASE_URL at import time
load_dotenv()

from venue_finance import models  # noqa: F401, E402  (registers tables)
from venue_finance.core.config import settings  # noqa: E402
from venue_finance.models.base import Base  # noqa: E402

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

URL = settings.sqlalchemy_database_url
OPTIONS = {
    "target_metadata": Base.metadata,
    "compare_type": True,
    # SQLite cannot ALTER most constraints in place
    "render_as_batch": URL.startswith("sqlite"),
}


def _run(**kwargs) -> None:
    context.configure(**OPTIONS, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    _run(url=URL, literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    with create_engine(URL, poolclass=pool.NullPool).connect() as connection:
        _run(connection=connection)
