"""Subscription store interface consumed by the cost aggregator."""

import datetime
import uuid
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from subscription_cost_svc.models.subscription import Subscription


class SubscriptionStore(ABC):

    @abstractmethod
    def find_overlapping(
        self,
        period_start: datetime.date,
        period_end: datetime.date,
        user_id: Optional[uuid.UUID] = None,
        service_name: Optional[str] = None,
    ) -> Sequence[Subscription]:
        """
        Return every subscription whose active range touches the period.

        A subscription matches when ``start_date <= period_end`` and its
        ``end_date`` is either unset or ``>= period_start``. When given,
        ``user_id`` and ``service_name`` are additional equality filters.
        Row order is unspecified.

        :raises FetchFailure: if the store could not be queried.
        """
