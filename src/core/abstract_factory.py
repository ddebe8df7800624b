from typing import Generic, Callable, TypeVar, Hashable, ClassVar


K = TypeVar("K", bound=Hashable)
T = TypeVar("T")
TypeMap = dict[K, type[T]]


class TypeAbstractFactory(Generic[K, T]):
    """
    Generic registry that maps a key to the class implementing it. Each
    subclass gets its own registry, so transport services registered on one
    factory are invisible to another.
    """

    _registry: ClassVar[TypeMap] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls._registry = {}

    @classmethod
    def register(cls, key: K) -> Callable[[type[T]], type[T]]:
        """
        Decorator for registering a concrete implementation type.
        """
        def wrapper(impl: type[T]) -> type[T]:
            cls._registry[key] = impl
            return impl

        return wrapper

    @classmethod
    def list_keys(cls) -> list[K]:
        return list(cls._registry.keys())

    @classmethod
    def resolve(cls, key: K) -> type[T]:
        try:
            return cls._registry[key]
        except KeyError:
            raise KeyError(f"{cls.__name__} has no implementation registered for {key!r}") from None

    @classmethod
    def create(cls, key: K, *args, **kwargs) -> T:
        return cls.resolve(key)(*args, **kwargs)
