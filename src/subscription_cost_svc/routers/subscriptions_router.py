import datetime
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, StrictInt
from sqlalchemy.orm import Session

from subscription_cost_svc.errors import InvalidFormat, SubscriptionNotFound
from subscription_cost_svc.models.base import get_db
from subscription_cost_svc.periods import parse_month
from subscription_cost_svc.repository import SubscriptionRepository
from subscription_cost_svc.subscription_service import SubscriptionPatch, SubscriptionService

router = APIRouter()


class SubscriptionCreateRequest(BaseModel):
    service_name: str
    price: StrictInt
    user_id: uuid.UUID
    start_date: str
    end_date: Optional[str] = None


class SubscriptionUpdateRequest(BaseModel):
    # Only fields present in the request body are applied
    service_name: Optional[str] = None
    price: Optional[StrictInt] = None
    user_id: Optional[uuid.UUID] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    service_name: str
    price: int
    user_id: uuid.UUID
    start_date: datetime.date
    end_date: Optional[datetime.date] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


def get_subscription_service(db: Session = Depends(get_db)) -> SubscriptionService:
    return SubscriptionService(SubscriptionRepository(db))


def _parse_month_field(name: str, raw: str) -> datetime.date:
    try:
        return parse_month(raw)
    except InvalidFormat:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"invalid {name} format, expected MM-YYYY or YYYY-MM",
        )


def _build_patch(update_request: SubscriptionUpdateRequest) -> SubscriptionPatch:
    changes = {}
    for field in update_request.model_fields_set:
        value = getattr(update_request, field)
        if field == "end_date":
            # null or "" makes the subscription open-ended
            changes[field] = _parse_month_field(field, value) if value else None
        elif value is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} cannot be null")
        elif field == "start_date":
            changes[field] = _parse_month_field(field, value)
        else:
            changes[field] = value
    return SubscriptionPatch(**changes)


@router.post("/subscriptions", status_code=201)
def create_subscription(
    subscription_request: SubscriptionCreateRequest,
    service: SubscriptionService = Depends(get_subscription_service),
):
    start_date = _parse_month_field("start_date", subscription_request.start_date)
    end_date = None
    if subscription_request.end_date:
        end_date = _parse_month_field("end_date", subscription_request.end_date)
    try:
        subscription = service.create_subscription(
            subscription_request.service_name,
            subscription_request.price,
            subscription_request.user_id,
            start_date,
            end_date,
        )
        return {"success": True, "id": subscription.id}
    except ValueError as ve:
        logging.error(ve, exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(ve))
    except Exception as e:
        logging.error(e, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="error creating subscription")


@router.get("/subscriptions", status_code=200)
def list_subscriptions(service: SubscriptionService = Depends(get_subscription_service)):
    try:
        subscriptions = service.list_subscriptions()
    except Exception as e:
        logging.error(e, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="error listing subscriptions")
    return {
        "success": True,
        "subscriptions": [SubscriptionResponse.model_validate(s).model_dump(mode="json") for s in subscriptions],
    }


# Registered before /subscriptions/{subscription_id} so "sum" is not read as an id
@router.get("/subscriptions/sum", status_code=200)
def sum_cost(
    period_from: Optional[str] = Query(None, alias="from"),
    period_to: Optional[str] = Query(None, alias="to"),
    user_id: Optional[str] = None,
    service_name: Optional[str] = None,
    service: SubscriptionService = Depends(get_subscription_service),
):
    if not period_from or not period_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from and to are required (format YYYY-MM or MM-YYYY)",
        )
    period_start = _parse_month_field("from", period_from)
    period_end = _parse_month_field("to", period_to)

    user_uuid = None
    if user_id:
        try:
            user_uuid = uuid.UUID(user_id.strip('" '))
        except ValueError as ve:
            logging.error(f"Invalid user_id {user_id!r}: {ve}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid user_id")

    try:
        total = service.sum_cost(period_start, period_end, user_uuid, service_name or None)
    except Exception as e:
        logging.error(e, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="error calculating sum")
    return {"success": True, "total": total}


@router.get("/subscriptions/{subscription_id}", status_code=200)
def get_subscription(subscription_id: int, service: SubscriptionService = Depends(get_subscription_service)):
    try:
        subscription = service.get_subscription(subscription_id)
    except SubscriptionNotFound as nf:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(nf))
    except Exception as e:
        logging.error(e, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="error getting subscription")
    return {"success": True, "subscription": SubscriptionResponse.model_validate(subscription).model_dump(mode="json")}


@router.put("/subscriptions/{subscription_id}", status_code=200)
def update_subscription(
    subscription_id: int,
    update_request: SubscriptionUpdateRequest,
    service: SubscriptionService = Depends(get_subscription_service),
):
    patch = _build_patch(update_request)
    try:
        subscription = service.update_subscription(subscription_id, patch)
    except SubscriptionNotFound as nf:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(nf))
    except ValueError as ve:
        logging.error(ve, exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(ve))
    except Exception as e:
        logging.error(e, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="error updating subscription")
    return {"success": True, "subscription": SubscriptionResponse.model_validate(subscription).model_dump(mode="json")}


@router.delete("/subscriptions/{subscription_id}", status_code=200)
def delete_subscription(subscription_id: int, service: SubscriptionService = Depends(get_subscription_service)):
    try:
        service.delete_subscription(subscription_id)
    except SubscriptionNotFound as nf:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(nf))
    except Exception as e:
        logging.error(e, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="error deleting subscription")
    return {"success": True}
