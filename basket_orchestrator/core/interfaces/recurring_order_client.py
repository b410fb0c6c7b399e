from abc import ABC, abstractmethod

from ..domain.entities.recurring_entity import (
    CreateRecurringOrderParams,
    CreatedRecurringOrder,
    RecurringOrderExecution,
)


class RecurringOrderClient(ABC):

    @abstractmethod
    async def create_order(self, params: CreateRecurringOrderParams) -> CreatedRecurringOrder:
        """
        Ask the recurring service to build the deposit transaction.
        """
        raise NotImplementedError

    @abstractmethod
    async def execute_order(self, signed_transaction: bytes, request_id: str) -> RecurringOrderExecution:
        """
        Hand the signed deposit transaction back to the service, which submits it.
        """
        raise NotImplementedError
