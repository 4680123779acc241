from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional, Union
from datetime import date

from life_ledger.crud import crud_installment, crud_transaction
from life_ledger.db.store import Store
from life_ledger.dependencies import store_for, user_for
from life_ledger.models import stats as stats_models
from life_ledger.models.installment import InstallmentResponse
from life_ledger.models.transaction import TransactionResponse
from life_ledger.services import analytics

router = APIRouter(
    prefix="/stats",
    tags=["stats"],
)


@router.get("", response_model=Union[List[stats_models.KPIStat], List[stats_models.MonthlyTrend]])
def read_stats(
    type: Optional[str] = Query(None, description="kpi, trends, analytics or recurring"),
    transaction_store: Store = Depends(store_for(crud_transaction.RESOURCE)),
    installment_store: Store = Depends(store_for(crud_installment.RESOURCE)),
    transaction_user_id: Optional[str] = Depends(user_for(crud_transaction.RESOURCE)),
    installment_user_id: Optional[str] = Depends(user_for(crud_installment.RESOURCE)),
):
    """
    Dashboard summary figures computed from transactions and installments.
    """
    try:
        stats_type = stats_models.StatsType(type)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid type")

    if stats_type == stats_models.StatsType.RECURRING:
        # Recurring bills are no longer tracked
        return []

    transactions = [
        TransactionResponse.model_validate(record)
        for record in crud_transaction.read_db_transactions(transaction_store, user_id=transaction_user_id)
    ]

    if stats_type == stats_models.StatsType.KPI:
        installments = [
            InstallmentResponse.model_validate(record)
            for record in crud_installment.read_db_installments(installment_store, user_id=installment_user_id)
        ]
        return analytics.kpi_stats(transactions, installments)
    if stats_type == stats_models.StatsType.TRENDS:
        return analytics.monthly_trends(transactions, date.today())
    return analytics.analytics_stats(transactions)
