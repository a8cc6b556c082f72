"""FastAPI web application for StudyHub."""

import logging
import os
import uuid
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from fastapi import Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy.orm import Session
from dotenv import load_dotenv

from studyhub.api.auth_models import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from studyhub.auth.dependencies import get_current_user
from studyhub.auth.jwt import create_access_token
from studyhub.auth.passwords import hash_password, validate_password, verify_password
from studyhub.database.database import get_db, init_db
from studyhub.database.user_data_repository import UserDataRepository
from studyhub.database.user_repository import UserRepository
from studyhub.engine.calendar_view import project_calendar
from studyhub.engine.notifications import derive_notifications, unread_count
from studyhub.engine.reminder import ReminderScanner
from studyhub.engine.stats import StatsAggregator
from studyhub.integrations.openai_client import AssistantClient, AssistantError, AssistantNotConfiguredError
from studyhub.models.base import CamelModel
from studyhub.models.calendar import CalendarView, StatusFilter, ViewMode
from studyhub.models.notification import NotificationItem
from studyhub.models.stats import TrendPoint, WeeklyStats
from studyhub.models.task import Task, TaskCategory, TaskPriority, TaskStatus, validate_day
from studyhub.models.user import User, UserData
from studyhub.session.task_store import TaskStore

load_dotenv()

logger = logging.getLogger(__name__)

CLIENT_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CLIENT_ORIGIN", "http://localhost:3000").split(",")
    if origin.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="StudyHub API",
    description="Study planner backend: tasks, calendar views, reminders and an AI study coach",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CLIENT_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Per-user reminder seen-sets; reset on logout
reminder_scanners: Dict[str, ReminderScanner] = {}

_assistant: Optional[AssistantClient] = None


def get_assistant() -> AssistantClient:
    """Shared assistant client (dependency for FastAPI)."""
    global _assistant
    if _assistant is None:
        _assistant = AssistantClient()
    return _assistant


def _scanner_for(user_id: str) -> ReminderScanner:
    scanner = reminder_scanners.get(user_id)
    if scanner is None:
        scanner = ReminderScanner()
        reminder_scanners[user_id] = scanner
    return scanner


# Request / response models
class UserDataResponse(BaseModel):
    data: UserData


class UserDataUpdate(CamelModel):
    """Bulk save of the dashboard blob; omitted or null fields keep their stored value."""
    tasks: Optional[List[Task]] = None
    stats: Optional[WeeklyStats] = None
    profile_image: Optional[str] = None
    reminder_enabled: Optional[bool] = None
    reminder_tone: Optional[str] = None


class TaskCreateRequest(CamelModel):
    """Request model for creating a task."""
    id: Optional[str] = None
    title: str
    time: str = "9:00 AM - 10:00 AM"
    day: str = "Mon"
    category: TaskCategory = TaskCategory.OTHER
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    color: str = "bg-blue-600"
    due_date: Optional[date] = None

    @field_validator("day")
    @classmethod
    def _known_day(cls, value: str) -> str:
        return validate_day(value)


class TaskUpdateRequest(CamelModel):
    """Request model for updating a task; only provided fields change."""
    title: Optional[str] = None
    time: Optional[str] = None
    day: Optional[str] = None
    category: Optional[TaskCategory] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    color: Optional[str] = None
    due_date: Optional[date] = None

    @field_validator("day")
    @classmethod
    def _known_day(cls, value: Optional[str]) -> Optional[str]:
        return validate_day(value) if value is not None else None


class TaskResponse(BaseModel):
    task: Task


class TaskListResponse(BaseModel):
    tasks: List[Task]
    count: int


class NotificationListResponse(CamelModel):
    notifications: List[NotificationItem]
    unread_count: int


class ReminderScanRequest(CamelModel):
    now: Optional[datetime] = Field(None, description="Client wall-clock time; defaults to server local time")


class ReminderScanResponse(CamelModel):
    enabled: bool
    missed_ids: List[str] = Field(default_factory=list)
    alerts: List[Dict[str, Any]] = Field(default_factory=list)


class DurationLogRequest(CamelModel):
    hour_label: str = Field(..., description="Hour bucket label, e.g. '9 AM'")
    minutes: float = Field(..., description="Minutes focused (clamped to 0-60)")


class StatsResponse(BaseModel):
    stats: WeeklyStats
    bucket: Optional[TrendPoint] = Field(None, description="Hour bucket written by this request")


class ChatTurn(BaseModel):
    role: str = Field("user", description="'user' or 'model'")
    text: str = ""


class ChatRequest(CamelModel):
    message: Optional[str] = None
    history: List[ChatTurn] = Field(default_factory=list)
    use_thinking: bool = False
    image_part: Optional[str] = Field(None, description="Base64 JPEG")


class ChatResponse(BaseModel):
    text: str
    audio: Optional[str] = None


class TranscribeRequest(CamelModel):
    base64_audio: str


class ImageGenerateRequest(CamelModel):
    prompt: str
    aspect_ratio: str = "1:1"
    size: str = "1K"


class ImageEditRequest(CamelModel):
    base64_image: str
    prompt: str


class InsightsRequest(BaseModel):
    stats: Optional[Dict[str, Any]] = None
    tasks: Optional[List[Dict[str, Any]]] = None


class TextResponse(BaseModel):
    text: str


class UrlResponse(BaseModel):
    url: str


def _assistant_call(func, *args, **kwargs):
    """Run an assistant call, mapping its failures to HTTP 500."""
    try:
        return func(*args, **kwargs)
    except (AssistantNotConfiguredError, AssistantError) as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/health")
async def health(assistant: AssistantClient = Depends(get_assistant)):
    """Health check endpoint."""
    return {"ok": True, "service": "studyhub-backend", "assistantConfigured": assistant.configured}


# Auth

@app.post("/api/auth/register", response_model=AuthResponse, status_code=201)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and return a token with the (empty) stored data."""
    name = request.name.strip()
    email = request.email.strip()
    if not name or not email or not request.password:
        raise HTTPException(status_code=400, detail="name, email and password are required")
    try:
        validate_password(request.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    users = UserRepository(db)
    if users.get_by_email(email):
        raise HTTPException(status_code=409, detail="Email already registered")

    user = users.create(name=name, email=email, password_hash=hash_password(request.password))
    data = UserDataRepository(db).get(user.id)
    logger.info(f"Registered user {user.id}")
    return AuthResponse(token=create_access_token(user.id, user.email), user=user.public(), data=data)


@app.post("/api/auth/login", response_model=AuthResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email/password for a token plus the stored data."""
    if not request.email or not request.password:
        raise HTTPException(status_code=400, detail="email and password are required")

    users = UserRepository(db)
    user = users.get_by_email(request.email)
    if not user or not verify_password(request.password, users.get_password_hash(request.email)):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    data = UserDataRepository(db).get(user.id)
    return AuthResponse(token=create_access_token(user.id, user.email), user=user.public(), data=data)


@app.get("/api/auth/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)):
    return MeResponse(user=current_user.public())


@app.post("/api/auth/logout", status_code=204)
def logout(current_user: User = Depends(get_current_user)):
    """Forget the user's reminder seen-set. Tokens are stateless and simply dropped by the client."""
    reminder_scanners.pop(current_user.id, None)
    return Response(status_code=204)


# Dashboard data

@app.get("/api/user/data", response_model=UserDataResponse)
def get_user_data(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return UserDataResponse(data=UserDataRepository(db).get(current_user.id))


@app.put("/api/user/data", response_model=UserDataResponse)
def save_user_data(
    request: UserDataUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Merge a bulk save into the stored blob."""
    data = UserDataRepository(db).save(
        current_user.id,
        tasks=request.tasks,
        stats=request.stats,
        profile_image=request.profile_image,
        reminder_enabled=request.reminder_enabled,
        reminder_tone=request.reminder_tone,
    )
    return UserDataResponse(data=data)


# Tasks

@app.get("/api/tasks", response_model=TaskListResponse)
def list_tasks(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    tasks = UserDataRepository(db).get(current_user.id).tasks
    return TaskListResponse(tasks=tasks, count=len(tasks))


@app.post("/api/tasks", response_model=TaskResponse, status_code=201)
def create_task(
    request: TaskCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add a task and count it as planned."""
    repo = UserDataRepository(db)
    data = repo.get(current_user.id)

    fields = request.model_dump(exclude={"id"})
    task = Task(id=request.id or str(uuid.uuid4()), **fields)

    store = TaskStore(data.tasks)
    try:
        store.add(task)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    aggregator = StatsAggregator(data.stats)
    aggregator.record_task_added()
    repo.save(current_user.id, tasks=store.list(), stats=aggregator.stats)
    return TaskResponse(task=task)


@app.put("/api/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    repo = UserDataRepository(db)
    store = TaskStore(repo.get(current_user.id).tasks)

    existing = store.get(task_id)
    if existing is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")

    # null clears the due date; for every other field it means "leave unchanged"
    changes = {
        key: value
        for key, value in request.model_dump(exclude_unset=True).items()
        if value is not None or key == "due_date"
    }
    try:
        updated = Task.model_validate({**existing.model_dump(), **changes})
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid task update: {e.error_count()} error(s)")
    store.update(updated)
    repo.save(current_user.id, tasks=store.list())
    return TaskResponse(task=updated)


@app.delete("/api/tasks/{task_id}", status_code=204)
def delete_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove a task and take it off the planned count."""
    repo = UserDataRepository(db)
    data = repo.get(current_user.id)

    store = TaskStore(data.tasks)
    if not store.delete(task_id):
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")

    aggregator = StatsAggregator(data.stats)
    aggregator.record_task_deleted()
    repo.save(current_user.id, tasks=store.list(), stats=aggregator.stats)
    return Response(status_code=204)


# Projections

@app.get("/api/calendar", response_model=CalendarView)
def get_calendar(
    view: ViewMode = Query(ViewMode.WEEKLY),
    reference: Optional[date] = Query(None, alias="date"),
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Calendar cells for a view around a reference date (defaults to today)."""
    tasks = UserDataRepository(db).get(current_user.id).tasks
    return project_calendar(tasks, reference or date.today(), view, status_filter)


@app.get("/api/notifications", response_model=NotificationListResponse)
def get_notifications(
    today: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tasks = UserDataRepository(db).get(current_user.id).tasks
    items = derive_notifications(tasks, today or date.today())
    return NotificationListResponse(notifications=items, unread_count=unread_count(items))


@app.post("/api/reminders/scan", response_model=ReminderScanResponse)
def scan_reminders(
    request: Optional[ReminderScanRequest] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Run one reminder scan over the stored tasks.

    Missed transitions are persisted; alerts are returned only the first time a
    task id is marked missed, for the client to play and display.
    """
    repo = UserDataRepository(db)
    data = repo.get(current_user.id)
    if not data.reminder_enabled:
        return ReminderScanResponse(enabled=False)

    now = request.now if request and request.now else datetime.now()
    result = _scanner_for(current_user.id).scan(data.tasks, now=now, reminder_tone=data.reminder_tone)
    if result.changed:
        repo.save(current_user.id, tasks=result.tasks)
        logger.info(f"Marked {len(result.missed_ids)} task(s) missed for user {current_user.id}")

    return ReminderScanResponse(
        enabled=True,
        missed_ids=result.missed_ids,
        alerts=[alert.to_dict() for alert in result.alerts],
    )


@app.post("/api/stats/duration", response_model=StatsResponse)
def log_duration(
    request: DurationLogRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add logged focus minutes to today's hours.

    Only ``hoursToday`` is stored. The hourly activity series is not persisted;
    the response carries the bucket this request wrote so the client can keep
    its own chart series.
    """
    repo = UserDataRepository(db)
    aggregator = StatsAggregator(repo.get(current_user.id).stats)
    try:
        aggregator.log_duration(request.hour_label, request.minutes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    repo.save(current_user.id, stats=aggregator.stats)
    bucket = next(point for point in aggregator.daily_activity if point.label == request.hour_label)
    return StatsResponse(stats=aggregator.stats, bucket=bucket)


# Assistant

@app.post("/api/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantClient = Depends(get_assistant),
):
    if not request.message and not request.image_part:
        raise HTTPException(status_code=400, detail="message or imagePart is required")
    text, audio = _assistant_call(
        assistant.chat,
        request.message,
        history=[turn.model_dump() for turn in request.history],
        use_thinking=request.use_thinking,
        image_part=request.image_part,
    )
    return ChatResponse(text=text, audio=audio)


@app.post("/api/transcribe", response_model=TextResponse)
def transcribe(
    request: TranscribeRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantClient = Depends(get_assistant),
):
    if not request.base64_audio:
        raise HTTPException(status_code=400, detail="base64Audio is required")
    return TextResponse(text=_assistant_call(assistant.transcribe, request.base64_audio))


@app.post("/api/image/generate", response_model=UrlResponse)
def generate_image(
    request: ImageGenerateRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantClient = Depends(get_assistant),
):
    if not request.prompt:
        raise HTTPException(status_code=400, detail="prompt is required")
    return UrlResponse(url=_assistant_call(assistant.generate_image, request.prompt, request.aspect_ratio, request.size))


@app.post("/api/image/edit", response_model=UrlResponse)
def edit_image(
    request: ImageEditRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantClient = Depends(get_assistant),
):
    if not request.base64_image or not request.prompt:
        raise HTTPException(status_code=400, detail="base64Image and prompt are required")
    return UrlResponse(url=_assistant_call(assistant.edit_image, request.base64_image, request.prompt))


@app.post("/api/insights", response_model=TextResponse)
def insights(
    request: InsightsRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantClient = Depends(get_assistant),
):
    task_count = len(request.tasks) if request.tasks else 0
    return TextResponse(text=_assistant_call(assistant.insights, request.stats, task_count))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8787")))
