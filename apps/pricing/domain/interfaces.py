from abc import ABC, abstractmethod

from apps.pricing.domain.models import FetchedRate


class BaseDollarRateProvider(ABC):
    name: str = ""

    @abstractmethod
    def get_rate_data(self) -> FetchedRate | None:
        pass
