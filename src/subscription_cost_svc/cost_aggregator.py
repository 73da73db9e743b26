import datetime
import logging
import uuid
from typing import Optional

from subscription_cost_svc.periods import months_inclusive, normalize_month
from subscription_cost_svc.store import SubscriptionStore


class CostAggregator:
    """
    Sums the prorated cost of subscriptions active during a period.

    Each overlapping subscription contributes ``price * months``, where months
    is the inclusive count of calendar months in its range clipped to the
    period. Stateless apart from the store reference, so one instance may
    serve concurrent requests.
    """

    def __init__(self, store: SubscriptionStore) -> None:
        self.store = store

    def sum_cost(
        self,
        period_start: datetime.date,
        period_end: datetime.date,
        user_id: Optional[uuid.UUID] = None,
        service_name: Optional[str] = None,
    ) -> int:
        """
        Total cost for the period, optionally filtered by user and service.

        :param period_start: First month of the period (first-of-month date).
        :param period_end: Last month of the period, inclusive.
        :param user_id: Only count this user's subscriptions.
        :param service_name: Only count subscriptions to this service.
        :return: The total; 0 when nothing overlaps.
        :raises FetchFailure: passed through unchanged from the store.
        """
        subscriptions = self.store.find_overlapping(period_start, period_end, user_id, service_name)

        total = 0
        for subscription in subscriptions:
            effective_start = max(subscription.start_date, period_start)
            if subscription.end_date is None:
                effective_end = period_end
            else:
                effective_end = min(subscription.end_date, period_end)

            months = months_inclusive(normalize_month(effective_start), normalize_month(effective_end))
            total += subscription.price * months

        logging.info(
            f"Summed {len(subscriptions)} subscriptions for {period_start}..{period_end} "
            f"(user_id={user_id}, service_name={service_name}): total {total}"
        )
        return total
