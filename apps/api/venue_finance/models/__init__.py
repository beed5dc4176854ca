"""
Models package.

Importing every model module registers its tables on Base.metadata, which both
Alembic and the test fixtures rely on. Import modules, not class names.
"""

from __future__ import annotations

# imported for the side effect of table registration

from venue_finance.models import company  # noqa: F401
from venue_finance.models import user  # noqa: F401
from venue_finance.models import table_session  # noqa: F401
from venue_finance.models import pos  # noqa: F401
from venue_finance.models import inventory  # noqa: F401
from venue_finance.models import expense  # noqa: F401
from venue_finance.models import financial_report  # noqa: F401
