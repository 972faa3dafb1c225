from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.api.dependencies import get_todo_service
from app.middleware.auth import get_current_user_id
from app.models.todo import (
    Priority,
    PriorityCounts,
    Todo,
    TodoCreate,
    TodoFilter,
    TodoListing,
    TodoStats,
    TodoUpdate,
)
from app.services.todo import TodoService

router = APIRouter(prefix="/api/todos", tags=["todos"])


# Request/Response models
class CreateTodoRequest(BaseModel):
    title: str
    description: Optional[str] = None
    completed: bool = False
    due_date: Optional[datetime] = None
    image_url: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: Optional[str] = None


class SetCompletedRequest(BaseModel):
    completed: bool


class UpdateImageRequest(BaseModel):
    image_url: str


class BulkRequest(BaseModel):
    todo_ids: List[str]


class TodoResponse(BaseModel):
    todo: Todo


class TodoListResponse(BaseModel):
    todos: List[Todo]
    count: int


class BulkResponse(BaseModel):
    count: int


class DeleteResponse(BaseModel):
    success: bool
    message: str


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Todo not found")


@router.get("", response_model=TodoListing)
async def list_todos(
    completed: Optional[bool] = None,
    priority: Optional[Priority] = None,
    category: Optional[str] = None,
    search_query: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    """
    Load the user's todo list view.

    The filter only narrows the returned todos; stats and priority counts
    always cover the whole batch.
    """
    params = {
        "completed": completed,
        "priority": priority,
        "category": category,
        "search_query": search_query,
    }
    todo_filter = TodoFilter().merged(**{k: v for k, v in params.items() if v is not None})
    return await service.load(user_id, todo_filter)


@router.get("/stats", response_model=TodoStats)
async def get_stats(
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    return await service.get_stats(user_id)


@router.get("/priority-counts", response_model=PriorityCounts)
async def get_priority_counts(
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    return await service.count_by_priority(user_id)


@router.get("/due", response_model=TodoListResponse)
async def get_todos_due_between(
    start: datetime,
    end: datetime,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    """Todos due between start and end (inclusive), earliest first"""
    todos = await service.get_due_between(user_id, start, end)
    return {"todos": todos, "count": len(todos)}


@router.post("/bulk/complete", response_model=BulkResponse)
async def bulk_complete(
    request: BulkRequest,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    count = await service.bulk_complete(user_id, request.todo_ids)
    return {"count": count}


@router.post("/bulk/delete", response_model=BulkResponse)
async def bulk_delete(
    request: BulkRequest,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    count = await service.bulk_delete(user_id, request.todo_ids)
    return {"count": count}


@router.post("", response_model=TodoResponse, status_code=201)
async def create_todo(
    request: CreateTodoRequest,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    """Create a new todo"""
    todo = await service.create_todo(user_id, TodoCreate(**request.model_dump()))
    return {"todo": todo}


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    todo = await service.get_todo(user_id, todo_id)
    if not todo:
        raise _not_found()
    return {"todo": todo}


@router.put("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: str,
    request: TodoUpdate,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    """Update an existing todo; only the fields sent are changed"""
    todo = await service.update_todo(user_id, todo_id, request)
    if not todo:
        raise _not_found()
    return {"todo": todo}


@router.patch("/{todo_id}/completed", response_model=TodoResponse)
async def set_completed(
    todo_id: str,
    request: SetCompletedRequest,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    todo = await service.set_completed(user_id, todo_id, request.completed)
    if not todo:
        raise _not_found()
    return {"todo": todo}


@router.put("/{todo_id}/image", response_model=TodoResponse)
async def update_image(
    todo_id: str,
    request: UpdateImageRequest,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    """Attach an uploaded image (hosted or data URL) to a todo"""
    todo = await service.update_image(user_id, todo_id, request.image_url)
    if not todo:
        raise _not_found()
    return {"todo": todo}


@router.delete("/{todo_id}", response_model=DeleteResponse)
async def delete_todo(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    deleted = await service.delete_todo(user_id, todo_id)
    if not deleted:
        raise _not_found()
    return {"success": True, "message": "Todo deleted successfully"}
