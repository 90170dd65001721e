"""Register Customer Use Case."""

from src.application.dto.requests import RegisterCustomerRequest
from src.application.dto.responses import CustomerResponse
from src.application.state import PosState
from src.application.sync import PersistenceSync
from src.config import get_logger
from src.core.entities.customer import Customer

logger = get_logger(__name__)


class RegisterCustomerUseCase:
    """Add a buyer with no spend and no preferences yet."""

    def __init__(
        self,
        state: PosState | None = None,
        sync: PersistenceSync | None = None,
    ):
        self._state = state
        self._sync = sync

    def _get_state(self) -> PosState:
        if self._state is None:
            from src.application.services import get_pos_state

            self._state = get_pos_state()
        return self._state

    async def _get_sync(self) -> PersistenceSync:
        if self._sync is None:
            from src.application.services import get_persistence_sync

            self._sync = await get_persistence_sync()
        return self._sync

    async def execute(self, request: RegisterCustomerRequest) -> Customer:
        state = self._get_state()
        sync = await self._get_sync()

        customer = Customer(
            name=request.name.strip(),
            phone=request.phone.strip(),
            email=request.email,
        )
        state.add_customer(customer)
        await sync.save_customer(customer)

        logger.info("customer_registered", customer_id=customer.id)
        return customer

    def to_response(self, customer: Customer) -> CustomerResponse:
        return CustomerResponse.from_entity(customer)
