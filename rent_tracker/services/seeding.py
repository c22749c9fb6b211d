"""
Seeding of system-wide default payment methods and categories.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.identifiers import SYSTEM_TENANT_ID
from rent_tracker.core.logger import get_logger
from rent_tracker.models.category import TransactionType
from rent_tracker.repositories.category import TransactionCategoryRepository
from rent_tracker.repositories.payment_method import PaymentMethodRepository
from rent_tracker.schemas.category import TransactionCategory
from rent_tracker.schemas.payment_method import PaymentMethod

logger = get_logger()

DEFAULT_PAYMENT_METHODS = [
    ("Bank Transfer", "Direct bank transfer payment"),
    ("Credit Card", "Payment via credit card"),
    ("Cash", "Cash payment"),
    ("Check", "Check payment"),
    ("PayPal", "Payment through PayPal service"),
]

DEFAULT_CATEGORIES = [
    ("Rent", "Rent received from tenants", TransactionType.INCOME),
    ("Bond", "Bond or security deposit received", TransactionType.INCOME),
    ("Other Income", "Miscellaneous income", TransactionType.INCOME),
    ("Maintenance", "Repairs and maintenance", TransactionType.EXPENSE),
    ("Insurance", "Landlord and building insurance", TransactionType.EXPENSE),
    ("Council Rates", "Council and water rates", TransactionType.EXPENSE),
    ("Management Fees", "Property management fees", TransactionType.EXPENSE),
    ("Mortgage Interest", "Interest on investment loans", TransactionType.EXPENSE),
    ("Other Expense", "Miscellaneous expenses", TransactionType.EXPENSE),
]


async def seed_system_defaults(session: AsyncSession) -> dict[str, int]:
    """Insert system payment methods and categories that are not yet present.

    Each set is seeded only when the system tenant has none of that kind, so
    running this repeatedly is safe.
    """
    payment_methods = PaymentMethodRepository(session)
    categories = TransactionCategoryRepository(session)
    created = {"payment_methods": 0, "categories": 0}

    if await payment_methods.count(SYSTEM_TENANT_ID) == 0:
        for name, description in DEFAULT_PAYMENT_METHODS:
            await payment_methods.create(
                PaymentMethod(
                    tenant_id=SYSTEM_TENANT_ID,
                    name=name,
                    description=description,
                    is_system_default=True,
                )
            )
            created["payment_methods"] += 1

    if await categories.count(SYSTEM_TENANT_ID) == 0:
        for order, (name, description, transaction_type) in enumerate(
            DEFAULT_CATEGORIES
        ):
            await categories.create(
                TransactionCategory(
                    tenant_id=SYSTEM_TENANT_ID,
                    name=name,
                    description=description,
                    transaction_type=transaction_type,
                    is_system_default=True,
                    order=order,
                )
            )
            created["categories"] += 1

    await session.commit()
    logger.info("Seeded system defaults", **created)
    return created
