from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, status

from areca.core.auth import CurrentUser, DbSession
from areca.core.rate_limit import rate_limit
from areca.schemas.common import MessageResponse
from areca.schemas.payment import (
    PaymentCreate,
    PaymentListResponse,
    PaymentMessageResponse,
    PaymentOut,
    PaymentResponse,
    PaymentStatusResponse,
    PaymentStatusSummaryOut,
    PaymentUpdate,
)
from areca.services.payment_service import PaymentService

router = APIRouter(
    prefix="/api/payments",
    tags=["Payments"],
    dependencies=[Depends(rate_limit("api"))],
)


@router.get("", response_model=PaymentListResponse)
def list_payments(user: CurrentUser, db: DbSession) -> PaymentListResponse:
    payments = PaymentService(db, user.id).list()
    return PaymentListResponse(payments=[PaymentOut.model_validate(p) for p in payments])


@router.post("", response_model=PaymentMessageResponse, status_code=status.HTTP_201_CREATED)
def create_payment(payload: PaymentCreate, user: CurrentUser, db: DbSession) -> PaymentMessageResponse:
    payment = PaymentService(db, user.id).create(payload)
    return PaymentMessageResponse(
        message="Payment created successfully", payment=PaymentOut.model_validate(payment)
    )


@router.get("/status", response_model=PaymentStatusResponse)
def get_payment_status(user: CurrentUser, db: DbSession) -> PaymentStatusResponse:
    """Pending kilograms per active employee since their latest payment.

    A storage failure is reported as HTTP 500
    ``{"error": "Failed to fetch payment status"}``.
    """
    summaries = PaymentService(db, user.id).payment_status()
    return PaymentStatusResponse(
        payment_status=[PaymentStatusSummaryOut(**asdict(s)) for s in summaries]
    )


@router.post("/status", response_model=PaymentMessageResponse, status_code=status.HTTP_201_CREATED)
def mark_employee_paid(payload: PaymentCreate, user: CurrentUser, db: DbSession) -> PaymentMessageResponse:
    """Record a PAID payment stamped now; later work counts as pending again."""
    payment = PaymentService(db, user.id).mark_paid(payload)
    return PaymentMessageResponse(message="Employee marked as paid", payment=PaymentOut.model_validate(payment))


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: str, user: CurrentUser, db: DbSession) -> PaymentResponse:
    payment = PaymentService(db, user.id).get(payment_id)
    return PaymentResponse(payment=PaymentOut.model_validate(payment))


@router.put("/{payment_id}", response_model=PaymentMessageResponse)
def update_payment(
    payment_id: str, payload: PaymentUpdate, user: CurrentUser, db: DbSession
) -> PaymentMessageResponse:
    payment = PaymentService(db, user.id).update(payment_id, payload)
    return PaymentMessageResponse(
        message="Payment updated successfully", payment=PaymentOut.model_validate(payment)
    )


@router.delete("/{payment_id}", response_model=MessageResponse)
def delete_payment(payment_id: str, user: CurrentUser, db: DbSession) -> MessageResponse:
    PaymentService(db, user.id).delete(payment_id)
    return MessageResponse(message="Payment deleted successfully")
