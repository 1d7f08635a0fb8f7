"""
Payment Service

Simulated payment records. There is no gateway: a payment is written as
``completed`` immediately and is the proof of access to a priced course.
"""

import logging
import uuid
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import Identity
from app.models.course import Course
from app.models.enums import PaymentStatus
from app.models.payment import Payment
from app.services import course_service


logger = logging.getLogger(__name__)


def new_transaction_id() -> str:
    return f"txn_{uuid.uuid4().hex}"


async def find_completed_payment(
    user_id: uuid.UUID,
    course_id: int,
    db: AsyncSession,
) -> Optional[Payment]:
    result = await db.execute(
        select(Payment)
        .where(
            Payment.user_id == user_id,
            Payment.course_id == course_id,
            Payment.status == PaymentStatus.COMPLETED,
        )
        .order_by(Payment.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def ensure_transaction_unused(transaction_id: str, db: AsyncSession) -> None:
    result = await db.execute(
        select(Payment.id).where(Payment.transaction_id == transaction_id)
    )
    if result.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Transaction ID has already been used",
        )


async def record_payment(
    user_id: uuid.UUID,
    course: Course,
    db: AsyncSession,
    amount: Optional[float] = None,
    transaction_id: Optional[str] = None,
) -> Payment:
    """
    Append a completed payment for a course.

    The payment is only flushed; the caller owns the commit so that a
    payment and the enrollment it unlocks land in the same transaction.

    Args:
        user_id: Paying user.
        course: Course being paid for.
        db: Database session.
        amount: Amount charged, defaults to the course price.
        transaction_id: Processor reference, generated when omitted.

    Returns:
        The new Payment.
    """
    if transaction_id:
        await ensure_transaction_unused(transaction_id, db)

    payment = Payment(
        user_id=user_id,
        course_id=course.id,
        amount=course.price if amount is None else amount,
        status=PaymentStatus.COMPLETED,
        transaction_id=transaction_id or new_transaction_id(),
    )
    db.add(payment)
    await db.flush()

    logger.info(
        "Payment %s recorded: user=%s course=%s amount=%.2f",
        payment.transaction_id,
        user_id,
        course.id,
        payment.amount,
    )
    return payment


async def pay_for_course(
    course_id: int,
    identity: Identity,
    db: AsyncSession,
    transaction_id: Optional[str] = None,
) -> Payment:
    """
    Pay for an approved priced course ahead of enrolling.

    Raises:
        HTTPException: 404 if the course is not in the catalog,
            400 for a free course, 409 if already paid.
    """
    course = await course_service.get_approved_course(course_id, db)

    if course.is_free:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This course is free and needs no payment",
        )

    if await find_completed_payment(identity.id, course.id, db):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Course already paid for",
        )

    payment = await record_payment(identity.id, course, db, transaction_id=transaction_id)
    await db.commit()
    return payment


async def get_payment_for_course(
    course_id: int,
    identity: Identity,
    db: AsyncSession,
) -> Payment:
    """Latest payment the caller made for a course (404 if none)."""
    result = await db.execute(
        select(Payment)
        .where(
            Payment.user_id == identity.id,
            Payment.course_id == course_id,
        )
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .limit(1)
    )
    payment = result.scalar_one_or_none()

    if not payment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No payment found for this course",
        )
    return payment


async def list_payments(db: AsyncSession) -> list[Payment]:
    result = await db.execute(
        select(Payment).order_by(Payment.created_at.desc(), Payment.id.desc())
    )
    return list(result.scalars().all())
