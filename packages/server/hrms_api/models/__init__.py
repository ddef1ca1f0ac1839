# Imported here so SQLModel.metadata is complete for Alembic and init_db.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .organisation import Organisation  # noqa: F401
from .user import User  # noqa: F401
from .employee import Employee  # noqa: F401
from .team import Team  # noqa: F401
from .employee_team import EmployeeTeam  # noqa: F401
from .log import Log  # noqa: F401
