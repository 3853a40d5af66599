from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..api.dependencies import get_storage
from ..auth.sessions import get_current_user
from ..constants import ACTIVITY_CREATED, ACTIVITY_UPDATED
from ..models.models import Task, User
from ..schemas.schemas import (
    PrioritySuggestion,
    PrioritySuggestionRequest,
    TaskCreate,
    TaskRead,
    TaskStatusUpdate,
)
from ..services.activity import record_activity
from ..services.priority import describe_suggestion, suggest_priority
from ..storage import Storage

router = APIRouter()


@router.get("", response_model=List[TaskRead])
def list_tasks(
    property_id: Optional[int] = Query(None, alias="propertyId"),
    assigned_to_id: Optional[int] = Query(None, alias="assignedToId"),
    storage: Storage = Depends(get_storage),
    _: User = Depends(get_current_user),
) -> List[Task]:
    if property_id is not None:
        tasks = storage.get_tasks_by_property(property_id)
        if assigned_to_id is not None:
            tasks = [task for task in tasks if task.assigned_to_id == assigned_to_id]
        return tasks
    if assigned_to_id is not None:
        return storage.get_tasks_by_assignee(assigned_to_id)
    return storage.get_tasks()


@router.post("", response_model=TaskRead, status_code=201)
def create_task(
    payload: TaskCreate,
    storage: Storage = Depends(get_storage),
    actor: User = Depends(get_current_user),
) -> Task:
    data = payload.model_dump()
    if data["priority"] is None:
        data["priority"] = suggest_priority(data["description"] or "")
    if data["reported_by_id"] is None:
        data["reported_by_id"] = actor.id

    task = storage.create_task(data)
    record_activity(
        storage,
        actor_user_id=actor.id,
        action=ACTIVITY_CREATED,
        entity_type="task",
        entity_id=task.id,
        details=f"Created task: {task.title}",
    )
    return task


@router.post("/suggest-priority", response_model=PrioritySuggestion)
def suggest_task_priority(
    payload: PrioritySuggestionRequest,
    _: User = Depends(get_current_user),
) -> PrioritySuggestion:
    priority, confidence, message = describe_suggestion(payload.description)
    return PrioritySuggestion(priority=priority, confidence=confidence, message=message)


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: int,
    storage: Storage = Depends(get_storage),
    _: User = Depends(get_current_user),
) -> Task:
    task = storage.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.patch("/{task_id}/status", response_model=TaskRead)
def update_task_status(
    task_id: int,
    payload: TaskStatusUpdate,
    storage: Storage = Depends(get_storage),
    actor: User = Depends(get_current_user),
) -> Task:
    task = storage.update_task_status(task_id, payload.status)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    record_activity(
        storage,
        actor_user_id=actor.id,
        action=ACTIVITY_UPDATED,
        entity_type="task",
        entity_id=task.id,
        details=f"Updated task status to: {payload.status}",
    )
    return task
