# AET Portal — Database Models
# Import all models here for SQLAlchemy discovery

from aet_portal.models.user import User              # noqa
from aet_portal.models.vehicle import Vehicle        # noqa
from aet_portal.models.license import License        # noqa
from aet_portal.models.activity import Activity      # noqa
