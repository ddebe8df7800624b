from abc import ABC, abstractmethod
from typing import Any, Callable

from config.models.transport import TransportServiceModel
from transport.base import TransportService
from transport.engine import TransportServiceFactory


class RuntimeFactory(ABC):

    @staticmethod
    @abstractmethod
    def build_factory(cfg: Any, *args, **kwargs) -> Callable[[], Any]: ...


class TransportRuntimeFactory(RuntimeFactory):

    @staticmethod
    def build_factory(cfg: TransportServiceModel) -> Callable[[], TransportService]:

        def factory() -> TransportService:
            return TransportServiceFactory.create(cfg.type, **cfg.to_runtime_args())

        return factory
