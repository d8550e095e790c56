"""Category CRUD and rule listing endpoints"""

from fastapi import APIRouter, Depends

from budget_ledger.api.v1.schemas import (
    CategoriesResponse,
    CategoryRulesResponse,
    CategoryRuleSchema,
    CategorySchema,
    CreateCategoryRequest,
    SuccessResponse,
)
from budget_ledger.api.dependencies import get_category_service, get_classification_service
from budget_ledger.services.categories import CategoryService
from budget_ledger.services.classification import ClassificationService

router = APIRouter()


@router.get("/categories", response_model=CategoriesResponse)
def list_categories(service: CategoryService = Depends(get_category_service)):
    categories = service.list_categories()
    return CategoriesResponse(categories=[CategorySchema.model_validate(c, from_attributes=True) for c in categories])


@router.post("/categories", response_model=CategorySchema)
def create_category(request_body: CreateCategoryRequest, service: CategoryService = Depends(get_category_service)):
    category = service.create_category(request_body.name, request_body.color, request_body.is_variable)
    return CategorySchema.model_validate(category, from_attributes=True)


@router.get("/categories/rules", response_model=CategoryRulesResponse)
def list_category_rules(service: ClassificationService = Depends(get_classification_service)):
    """Description rules with their category name and color"""
    rules = service.list_rules()
    return CategoryRulesResponse(rules=[CategoryRuleSchema.model_validate(r, from_attributes=True) for r in rules])


@router.post("/categories/{category_id}/variable", response_model=CategorySchema)
def set_variable_category(category_id: str, service: CategoryService = Depends(get_category_service)):
    """Designate the variable-expense bucket used by budget derivation"""
    category = service.set_variable_category(category_id)
    return CategorySchema.model_validate(category, from_attributes=True)


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
def delete_category(category_id: str, service: CategoryService = Depends(get_category_service)):
    """Delete a category; its transactions become uncategorized"""
    service.delete_category(category_id)
    return SuccessResponse()
