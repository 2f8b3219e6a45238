# Lot Manager — Database Models
# Import all models here for SQLAlchemy discovery

from lotmanager.models.category import VehicleCategory   # noqa
from lotmanager.models.space import Space                # noqa
from lotmanager.models.tariff import Tariff, BillingMode # noqa
from lotmanager.models.trip import Trip, TripStatus      # noqa
