from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.dependencies import get_todo_service
from app.services.todo import TodoService

router = APIRouter(prefix="/api/categories", tags=["categories"])


class CategoryListResponse(BaseModel):
    categories: List[str]


@router.get("", response_model=CategoryListResponse)
async def list_categories(service: TodoService = Depends(get_todo_service)):
    """Distinct category names, sorted; empty if the store cannot be read"""
    return {"categories": await service.get_categories()}
