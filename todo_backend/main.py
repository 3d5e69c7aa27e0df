import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_backend import schemas
from todo_backend.config import Settings
from todo_backend.errors import NotFoundError, TodoError, ValidationError
from todo_backend.storage import TodoStorage

logger = logging.getLogger(__name__)

GREETING = "Hello from your TODO backend!"

router = APIRouter()


# SQLite INTEGER is a signed 64-bit value
_MAX_ID = 2 ** 63 - 1

_ERRORS = {
    400: {"model": schemas.ErrorBody},
    404: {"model": schemas.ErrorBody},
    500: {"model": schemas.ErrorBody},
}


def get_storage(request: Request) -> TodoStorage:
    return request.app.state.storage


def parse_todo_id(raw: str) -> int:
    """An id that is not an integer SQLite can hold matches no row."""
    try:
        todo_id = int(raw)
    except ValueError:
        raise NotFoundError("Todo not found.") from None
    if not -_MAX_ID - 1 <= todo_id <= _MAX_ID:
        raise NotFoundError("Todo not found.")
    return todo_id


@router.get("/", response_class=PlainTextResponse)
def read_root():
    return GREETING


@router.get("/todos", response_model=List[schemas.TodoRead], responses={500: _ERRORS[500]})
def read_todos(storage: TodoStorage = Depends(get_storage)):
    return [schemas.TodoRead.model_validate(t) for t in storage.list_all()]


@router.post(
    "/todos",
    response_model=schemas.TodoRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
)
def create_todo(
    todo: Optional[schemas.TodoCreate] = None,
    storage: TodoStorage = Depends(get_storage),
):
    if todo is None or not todo.title:
        raise ValidationError("Title is required")
    priority = int(todo.priority) if todo.priority is not None else 0
    todo_id = storage.insert(todo.title, priority)
    return schemas.TodoRead(id=todo_id, title=todo.title, completed=0, priority=priority)


@router.patch("/todos/{todo_id}", response_model=schemas.ChangeResult, responses=_ERRORS)
def update_todo(
    todo_id: str,
    todo: Optional[schemas.TodoUpdate] = None,
    storage: TodoStorage = Depends(get_storage),
):
    values = todo.supplied() if todo is not None else {}
    if not values:
        raise ValidationError("No fields to update provided.")
    if "title" in values and not values["title"]:
        raise ValidationError("Title cannot be empty")
    changes = storage.update(parse_todo_id(todo_id), values)
    if changes == 0:
        raise NotFoundError("Todo not found.")
    return schemas.ChangeResult(message="Todo updated successfully", changes=changes)


@router.delete(
    "/todos/{todo_id}",
    response_model=schemas.ChangeResult,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
)
def delete_todo(todo_id: str, storage: TodoStorage = Depends(get_storage)):
    changes = storage.delete(parse_todo_id(todo_id))
    if changes == 0:
        raise NotFoundError("Todo not found.")
    return schemas.ChangeResult(message="Todo deleted successfully", changes=changes)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request")
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    return _error(status.HTTP_400_BAD_REQUEST, f"{loc}: {message}" if loc else message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def create_app(settings: Optional[Settings] = None, storage: Optional[TodoStorage] = None) -> FastAPI:
    """Build the application and bring the schema up to date.

    Schema problems are logged and do not stop the app from serving.
    """
    if settings is None:
        settings = Settings.from_env()
    if storage is None:
        storage = TodoStorage(settings.database_url)
    if not storage.init_schema():
        logger.warning("Serving with an incomplete schema; data requests may fail")

    app = FastAPI(title="Todo Backend")
    app.state.settings = settings
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TodoError, todo_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router)
    return app
