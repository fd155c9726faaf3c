import logging
from types import TracebackType
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from ..config import LedgerSettings
from ..domain.command import Command
from ..domain.query import Query
from .aggregates import (
    AccountRepository,
    CondominiumRepository,
    ExpenseCategoryRepository,
    ExpenseRepository,
    FeeItemRepository,
    OwnerRepository,
    UnitLedgerAccountRepository,
    UnitRepository,
)
from .commands import (
    AccountCommandHandler,
    CatalogCommandHandler,
    CommandBus,
    CommandToHandlerMap,
    ConcurrencyRetryMiddleware,
    CondominiumCommandHandler,
    DelegateToHandler,
    ExpenseCommandHandler,
    LedgerCommandHandler,
    LoggingMiddleware,
    OwnerCommandHandler,
    UnitCommandHandler,
)
from .events import EventStore, InMemoryEventStore
from .projections import (
    InMemoryReadModelStore,
    LedgerQueries,
    ProjectionManager,
    ReadModelStore,
    ledger_projectors,
)

if TYPE_CHECKING:
    from ..integrations.mongodb import MongoConfiguration

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class HasLifecycle(Protocol):
    async def on_startup(self) -> None:
        """Called when the application is started."""
        ...

    async def on_shutdown(self) -> None:
        """Called when the application is shutdown."""
        ...


class LedgerApplication:
    """The condominium ledger, wired end to end.

    Owns the event store, the read models and everything built on them:
    projections, one repository per aggregate, the command bus with its
    middleware and the query handler. Use ``in_memory()`` for tests and
    single-process use and ``with_mongodb()`` for durable storage.

    Example:
        >>> async with LedgerApplication.in_memory() as app:
        ...     condominium_id = await app.dispatch(RegisterCondominium(...))
        ...     details = await app.query(GetCondominiumDetails(condominium_id=condominium_id))
    """

    def __init__(
        self,
        event_store: EventStore,
        read_models: ReadModelStore,
        settings: LedgerSettings | None = None,
        dependencies: list[Any] | None = None,
    ):
        """
        Args:
            event_store: Where events are appended and loaded from.
            read_models: Where projectors write and queries read.
            settings: Application settings; read from the environment
                when omitted.
            dependencies: Objects whose ``on_startup``/``on_shutdown``
                hooks follow the application lifecycle, in start order.
        """
        self.settings = settings or LedgerSettings()
        self.event_store = event_store
        self.read_models = read_models
        self.dependencies = dependencies or []

        self.projections = ProjectionManager(ledger_projectors(read_models), read_models)

        self.accounts = AccountRepository(event_store, self.projections)
        self.condominiums = CondominiumRepository(event_store, self.projections)
        self.units = UnitRepository(event_store, self.projections)
        self.owners = OwnerRepository(event_store, self.projections)
        self.ledger_accounts = UnitLedgerAccountRepository(event_store, self.projections)
        self.expenses = ExpenseRepository(event_store, self.projections)
        self.fee_items = FeeItemRepository(event_store, self.projections)
        self.expense_categories = ExpenseCategoryRepository(event_store, self.projections)

        handlers = CommandToHandlerMap.from_handlers(
            [
                AccountCommandHandler(self.accounts),
                CondominiumCommandHandler(self.condominiums),
                OwnerCommandHandler(self.owners),
                UnitCommandHandler(self.units, self.condominiums, self.owners),
                CatalogCommandHandler(self.condominiums, self.fee_items, self.expense_categories),
                LedgerCommandHandler(self.ledger_accounts, self.units, self.fee_items),
                ExpenseCommandHandler(self.expenses, self.condominiums, self.expense_categories),
            ]
        )
        self.command_bus = CommandBus(
            DelegateToHandler(handlers),
            [
                LoggingMiddleware(self.settings.command_log_level),
                ConcurrencyRetryMiddleware(
                    self.settings.concurrency_max_attempts,
                    self.settings.concurrency_retry_delay,
                ),
            ],
        )
        self.queries = LedgerQueries(read_models, event_store, self.settings.default_currency)

    @classmethod
    def in_memory(cls, settings: LedgerSettings | None = None) -> "LedgerApplication":
        return cls(InMemoryEventStore(), InMemoryReadModelStore(), settings)

    @classmethod
    def with_mongodb(
        cls,
        config: "MongoConfiguration | None" = None,
        settings: LedgerSettings | None = None,
    ) -> "LedgerApplication":
        """Build an application on MongoDB.

        The event log indexes are created on startup, and the client is
        closed on shutdown.
        """
        from ..integrations.mongodb import (
            MongoConfiguration,
            MongoEventStore,
            MongoReadModelStore,
        )

        config = config or MongoConfiguration()
        event_store = MongoEventStore(config)
        return cls(
            event_store,
            MongoReadModelStore(config),
            settings,
            dependencies=[config, event_store],
        )

    @classmethod
    def from_settings(cls, settings: LedgerSettings | None = None) -> "LedgerApplication":
        """Build the application for the backend named in the settings."""
        settings = settings or LedgerSettings()
        if settings.backend == "mongodb":
            return cls.with_mongodb(settings=settings)
        return cls.in_memory(settings)

    async def dispatch(self, command: Command[T]) -> T:
        """Dispatch a command through the middleware chain to its handler.

        Returns:
            What the handler returns: the new aggregate id for creation
            commands, ``None`` otherwise.
        """
        return await self.command_bus.dispatch(command)

    async def query(self, query: Query[T]) -> T:
        return await self.queries.query(query)

    async def replay_projections(
        self,
        from_position: int = 1,
        to_position: int | None = None,
        rebuild: bool = False,
    ) -> int:
        """Re-project stored events into the read models.

        Args:
            from_position: First global position to replay.
            to_position: Last global position to replay, if any.
            rebuild: Drop every read-model table first.

        Returns:
            The number of events replayed.
        """
        if rebuild:
            await self.read_models.clear()
        replayed = await self.projections.replay(
            self.event_store,
            from_position,
            to_position,
            batch_size=self.settings.replay_batch_size,
        )
        LOGGER.info("Replayed projections", extra={"count": replayed, "rebuild": rebuild})
        return replayed

    async def startup(self) -> None:
        """Start dependencies in registration order."""
        for dependency in self.dependencies:
            if isinstance(dependency, HasLifecycle):
                await dependency.on_startup()

    async def shutdown(self) -> None:
        """Shut dependencies down in reverse registration order."""
        for dependency in reversed(self.dependencies):
            if isinstance(dependency, HasLifecycle):
                await dependency.on_shutdown()

    async def __aenter__(self) -> "LedgerApplication":
        await self.startup()
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_value: BaseException | None,
        _traceback: TracebackType | None,
    ) -> None:
        await self.shutdown()
