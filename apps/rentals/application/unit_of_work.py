"""Unit of work contract used by the rental write paths."""

from abc import abstractmethod

from shared.application.uow import AbstractUnitOfWork


class RentalsUnitOfWork(AbstractUnitOfWork):
    """
    Unit of work that can also serialize writers per property

    Every write path calls lock_property() before its availability check,
    so check-then-write on one property is linearizable with every other
    check-then-write on the same property. The lock is held until the unit
    of work ends.
    """

    @abstractmethod
    def lock_property(self, property_id: int) -> None:
        pass
