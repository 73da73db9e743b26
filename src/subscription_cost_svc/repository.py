import datetime
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from subscription_cost_svc.errors import FetchFailure
from subscription_cost_svc.models.subscription import Subscription
from subscription_cost_svc.store import SubscriptionStore


class SubscriptionRepository(SubscriptionStore):
    """
    SQLAlchemy-backed persistence for subscriptions.

    Reads raise FetchFailure chained to the underlying database error. Writes
    roll back the session on failure and re-raise the original error.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except Exception as commit_error:
            self.db.rollback()
            logging.error(f"Error during subscription {action}: {commit_error}", exc_info=True)
            raise

    def create(
        self,
        service_name: str,
        price: int,
        user_id: uuid.UUID,
        start_date: datetime.date,
        end_date: Optional[datetime.date] = None,
    ) -> Subscription:
        subscription = Subscription(
            service_name=service_name,
            price=price,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
        )
        self.db.add(subscription)
        self._commit("create")
        self.db.refresh(subscription)
        logging.info(f"Subscription {subscription.id} created for user {user_id}.")
        return subscription

    def list_all(self) -> List[Subscription]:
        try:
            return self.db.query(Subscription).order_by(Subscription.id).all()
        except SQLAlchemyError as e:
            raise FetchFailure(f"error listing subscriptions: {e}") from e

    def get(self, subscription_id: int) -> Optional[Subscription]:
        try:
            return self.db.query(Subscription).filter(Subscription.id == subscription_id).first()
        except SQLAlchemyError as e:
            raise FetchFailure(f"error getting subscription {subscription_id}: {e}") from e

    def update(self, subscription: Subscription, values: Dict[str, Any]) -> Subscription:
        for field, value in values.items():
            setattr(subscription, field, value)
        self.db.add(subscription)
        self._commit("update")
        self.db.refresh(subscription)
        logging.info(f"Subscription {subscription.id} updated: {sorted(values)}.")
        return subscription

    def delete(self, subscription: Subscription) -> None:
        subscription_id = subscription.id
        self.db.delete(subscription)
        self._commit("delete")
        logging.info(f"Subscription {subscription_id} deleted.")

    def find_overlapping(
        self,
        period_start: datetime.date,
        period_end: datetime.date,
        user_id: Optional[uuid.UUID] = None,
        service_name: Optional[str] = None,
    ) -> List[Subscription]:
        query = self.db.query(Subscription).filter(
            Subscription.start_date <= period_end,
            or_(Subscription.end_date.is_(None), Subscription.end_date >= period_start),
        )
        if user_id is not None:
            query = query.filter(Subscription.user_id == user_id)
        if service_name is not None:
            query = query.filter(Subscription.service_name == service_name)
        try:
            return query.all()
        except SQLAlchemyError as e:
            raise FetchFailure(f"error getting subscriptions for period: {e}") from e
