from dataclasses import dataclass

from catalog.core.pricing import TaxPolicy
from catalog.core.services.database import DbSessionService
from catalog.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    tax_policy: TaxPolicy
