import dataclasses
import datetime
import uuid
from typing import Any, Dict, List, Optional

from subscription_cost_svc.cost_aggregator import CostAggregator
from subscription_cost_svc.errors import SubscriptionNotFound, SubscriptionValidationError
from subscription_cost_svc.models.subscription import Subscription
from subscription_cost_svc.repository import SubscriptionRepository


# Prices are stored in a 32-bit INTEGER column
MAX_PRICE = 2**31 - 1


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclasses.dataclass(frozen=True)
class SubscriptionPatch:
    """
    Partial update of a subscription. Fields left as UNSET keep their stored
    value; ``end_date=None`` clears the end date.
    """
    service_name: Any = UNSET
    price: Any = UNSET
    user_id: Any = UNSET
    start_date: Any = UNSET
    end_date: Any = UNSET

    def changes(self) -> Dict[str, Any]:
        return {
            field.name: getattr(self, field.name)
            for field in dataclasses.fields(self)
            if getattr(self, field.name) is not UNSET
        }


def validate_subscription(
    service_name: str,
    price: int,
    start_date: datetime.date,
    end_date: Optional[datetime.date],
) -> None:
    """
    Check write-path rules for a subscription.

    :raises SubscriptionValidationError: on an empty service name, a price
        outside 0..MAX_PRICE, or an end date before the start date.
    """
    if not service_name or not service_name.strip():
        raise SubscriptionValidationError("service_name cannot be empty")
    if price is None or price < 0:
        raise SubscriptionValidationError("price must be >= 0")
    if price > MAX_PRICE:
        raise SubscriptionValidationError(f"price must be <= {MAX_PRICE}")
    if start_date is None:
        raise SubscriptionValidationError("start_date is required")
    if end_date is not None and end_date < start_date:
        raise SubscriptionValidationError("end_date cannot be before start_date")


class SubscriptionService:

    def __init__(self, repository: SubscriptionRepository) -> None:
        self.repository = repository
        self.aggregator = CostAggregator(repository)

    def create_subscription(
        self,
        service_name: str,
        price: int,
        user_id: uuid.UUID,
        start_date: datetime.date,
        end_date: Optional[datetime.date] = None,
    ) -> Subscription:
        validate_subscription(service_name, price, start_date, end_date)
        return self.repository.create(service_name, price, user_id, start_date, end_date)

    def list_subscriptions(self) -> List[Subscription]:
        return self.repository.list_all()

    def get_subscription(self, subscription_id: int) -> Subscription:
        subscription = self.repository.get(subscription_id)
        if subscription is None:
            raise SubscriptionNotFound(subscription_id)
        return subscription

    def update_subscription(self, subscription_id: int, patch: SubscriptionPatch) -> Subscription:
        """
        Merge ``patch`` onto the stored subscription, validate the result and
        persist it. Nothing is written when validation fails.
        """
        subscription = self.get_subscription(subscription_id)
        changes = patch.changes()
        merged = {
            "service_name": changes.get("service_name", subscription.service_name),
            "price": changes.get("price", subscription.price),
            "start_date": changes.get("start_date", subscription.start_date),
            "end_date": changes.get("end_date", subscription.end_date),
        }
        validate_subscription(**merged)
        if not changes:
            return subscription
        return self.repository.update(subscription, changes)

    def delete_subscription(self, subscription_id: int) -> None:
        self.repository.delete(self.get_subscription(subscription_id))

    def sum_cost(
        self,
        period_start: datetime.date,
        period_end: datetime.date,
        user_id: Optional[uuid.UUID] = None,
        service_name: Optional[str] = None,
    ) -> int:
        return self.aggregator.sum_cost(period_start, period_end, user_id, service_name)
