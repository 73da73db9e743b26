import datetime

from sqlalchemy import Column, Date, DateTime, Integer, String, Uuid
from subscription_cost_svc.models.base import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Subscription(Base):
    """
    Subscription model: a user's paid service billed monthly from start_date
    through end_date (inclusive). A NULL end_date means open-ended.
    """
    __tablename__ = 'subscriptions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_name = Column(String, nullable=False, index=True)
    price = Column(Integer, nullable=False)
    user_id = Column(Uuid, nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, service_name={self.service_name}, price={self.price}, "
            f"start_date={self.start_date}, end_date={self.end_date})>"
        )
