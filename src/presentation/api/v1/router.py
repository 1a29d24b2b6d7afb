from fastapi import APIRouter

from .health import health_router
from .transactions import transaction_router
from .accounts import account_router
from .reports import report_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(transaction_router, tags=["Transactions"])
router.include_router(account_router, tags=["Bank Accounts"])
router.include_router(report_router, tags=["Reports"])
