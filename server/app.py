"""FastAPI web server for dbadmin."""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from dbadmin.config import Settings, get_settings
from dbadmin.db.connection import ConnectionManager
from dbadmin.db.driver import Driver, get_driver
from dbadmin.db.errors import (
    AdminError,
    BadInput,
    InvalidConnectionString,
    NoActiveConnection,
)
from dbadmin.logging_setup import configure_logging
from dbadmin.models.table import ColumnSpec, CreateTableArg, Table
from dbadmin.services.admin_service import AdminService

logger = logging.getLogger(__name__)


# Request Models
class TableField(BaseModel):
    name: str
    field_type: str


class CreateTableRequest(BaseModel):
    table_name: str
    fields: list[TableField]

    def to_arg(self) -> CreateTableArg:
        return CreateTableArg(
            table_name=self.table_name,
            fields=[ColumnSpec(name=f.name, field_type=f.field_type) for f in self.fields],
        )


# Dependencies
def get_service(request: Request) -> AdminService:
    return request.app.state.service


async def raw_body(request: Request) -> bytes:
    return await request.body()


def _decode_text(body: bytes) -> str:
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BadInput("request body is not valid UTF-8", cause=e) from e


def _connection_string(body: bytes) -> str:
    """Raw text body; a JSON-quoted string is unquoted."""
    text = _decode_text(body).strip()
    if text.startswith('"'):
        try:
            text = json.loads(text)
        except json.JSONDecodeError as e:
            raise BadInput("malformed quoted connection string", cause=e) from e
    if not isinstance(text, str) or not text:
        raise BadInput("empty connection string")
    return text


def _statement(body: bytes) -> str:
    """A JSON-encoded statement string."""
    try:
        value = json.loads(_decode_text(body))
    except json.JSONDecodeError as e:
        raise BadInput("statement must be a JSON string", cause=e) from e
    if not isinstance(value, str) or not value.strip():
        raise BadInput("statement must be a non-empty JSON string")
    return value


def _table_response(table: Table) -> JSONResponse:
    headers = {}
    if table.skipped:
        headers["X-Skipped-Rows"] = str(len(table.skipped))
    return JSONResponse(content=table.to_dict(), headers=headers)


# Error mapping
async def admin_error_handler(request: Request, exc: AdminError) -> JSONResponse:
    where = f"{request.method} {request.url.path}"
    if isinstance(exc, (BadInput, NoActiveConnection)):
        logger.info(f"{where}: {exc.code}: {exc}")
    elif isinstance(exc, InvalidConnectionString):
        logger.warning(f"{where}: {exc.code}: {exc}")
    else:
        logger.error(f"{where}: {exc.code}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.code})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path}: bad_input: {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": BadInput.code})


def create_app(settings: Optional[Settings] = None, driver: Optional[Driver] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Auto-connect on startup when configured; close on shutdown."""
        service: AdminService = app.state.service
        if settings.DEFAULT_CONNECTION:
            try:
                service.connect(settings.DEFAULT_CONNECTION)
            except AdminError as e:
                logger.error(f"Startup connection failed: {e.code}: {e}")
        logger.info(f"{settings.APP_NAME} started - driver: {service.manager.driver.name}")
        yield
        service.close()
        logger.info(f"{settings.APP_NAME} shutting down")

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Inspect and mutate a single attached database",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    manager = ConnectionManager(driver or get_driver(settings.DB_DRIVER))
    app.state.service = AdminService(manager, settings)

    app.add_exception_handler(AdminError, admin_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # -- connection ------------------------------------------------------------

    @app.get("/status")
    def get_status(service: AdminService = Depends(get_service)):
        return service.status().to_dict()

    @app.post("/connect")
    def connect(body: bytes = Depends(raw_body), service: AdminService = Depends(get_service)):
        status = service.connect(_connection_string(body))
        return {"status": "connected", **status.to_dict()}

    @app.post("/close")
    def close(service: AdminService = Depends(get_service)):
        closed = service.close()
        return {"status": "closed" if closed else "already_closed"}

    # -- schema ----------------------------------------------------------------

    @app.get("/{db}/tables")
    def list_tables(db: str, service: AdminService = Depends(get_service)):
        return service.list_tables()

    @app.get("/{db}/tables/{table}/schema")
    def describe_table(db: str, table: str, service: AdminService = Depends(get_service)):
        return service.describe_table(table)

    @app.get("/{db}/tables/{table}")
    def dump_table(
        db: str,
        table: str,
        limit: Optional[int] = None,
        service: AdminService = Depends(get_service),
    ):
        return _table_response(service.dump_table(table, limit))

    @app.post("/{db}/tables")
    def create_table(db: str, payload: CreateTableRequest, service: AdminService = Depends(get_service)):
        service.create_table(payload.to_arg())
        return {"status": "created", "table_name": payload.table_name}

    @app.delete("/{db}/tables/{table}")
    def drop_table(db: str, table: str, service: AdminService = Depends(get_service)):
        service.drop_table(table)
        return {"status": "dropped", "table_name": table}

    # -- free-form statements --------------------------------------------------

    @app.post("/{db}/exec")
    def execute(db: str, body: bytes = Depends(raw_body), service: AdminService = Depends(get_service)):
        rows_affected = service.execute(_statement(body))
        return {"status": "ok", "rows_affected": rows_affected}

    @app.post("/{db}/query")
    def query(db: str, body: bytes = Depends(raw_body), service: AdminService = Depends(get_service)):
        return _table_response(service.query(_statement(body)))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server.app:app", host=get_settings().API_HOST, port=get_settings().API_PORT)
