"""Single-transaction mutation endpoints"""

from fastapi import APIRouter, Depends

from budget_ledger.api.v1.schemas import (
    SetCategoryRequest,
    SetCategoryResponse,
    SetCommentRequest,
    SetFlagRequest,
    SuccessResponse,
)
from budget_ledger.api.dependencies import get_classification_service
from budget_ledger.services.classification import ClassificationService

router = APIRouter()


@router.post("/transactions/category", response_model=SetCategoryResponse)
def set_transaction_category(
    request_body: SetCategoryRequest,
    service: ClassificationService = Depends(get_classification_service),
):
    """
    Set or clear a transaction's category.

    Setting a category also learns a rule for the description and applies it
    to other uncategorized transactions with the same description.
    """
    cascaded = service.apply_category(request_body.transaction_id, request_body.category_id)
    return SetCategoryResponse(cascaded=cascaded)


@router.post("/transactions/transfer", response_model=SuccessResponse)
def set_transaction_transfer(
    request_body: SetFlagRequest,
    service: ClassificationService = Depends(get_classification_service),
):
    service.set_transfer(request_body.transaction_id, request_body.value)
    return SuccessResponse()


@router.post("/transactions/investment", response_model=SuccessResponse)
def set_transaction_investment(
    request_body: SetFlagRequest,
    service: ClassificationService = Depends(get_classification_service),
):
    service.set_investment(request_body.transaction_id, request_body.value)
    return SuccessResponse()


@router.post("/transactions/occasional-income", response_model=SuccessResponse)
def set_transaction_occasional_income(
    request_body: SetFlagRequest,
    service: ClassificationService = Depends(get_classification_service),
):
    service.set_occasional_income(request_body.transaction_id, request_body.value)
    return SuccessResponse()


@router.post("/transactions/comment", response_model=SuccessResponse)
def set_transaction_comment(
    request_body: SetCommentRequest,
    service: ClassificationService = Depends(get_classification_service),
):
    service.set_comment(request_body.transaction_id, request_body.comment)
    return SuccessResponse()
