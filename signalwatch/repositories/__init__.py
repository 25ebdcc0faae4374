"""Repository pattern implementation for database access abstraction.

Exports:
    Repository: Generic base class for all repositories
    AlertRepository: Repository for Alert entity
    CellularSignalReadingRepository: Repository for CellularSignalReading entity
    ConnectivitySampleRepository: Repository for ConnectivitySample entity
    DeviceRepository: Repository for Device entity
    LocationRepository: Repository for Location entity
    UserRepository: Repository for User entity and alert preferences
"""

from signalwatch.repositories.alert_repository import AlertRepository
from signalwatch.repositories.base import Repository
from signalwatch.repositories.connectivity_repository import (
    CellularSignalReadingRepository,
    ConnectivitySampleRepository,
)
from signalwatch.repositories.device_repository import DeviceRepository
from signalwatch.repositories.location_repository import LocationRepository
from signalwatch.repositories.user_repository import UserRepository

__all__ = [
    "AlertRepository",
    "CellularSignalReadingRepository",
    "ConnectivitySampleRepository",
    "DeviceRepository",
    "LocationRepository",
    "Repository",
    "UserRepository",
]
