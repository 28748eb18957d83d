"""
Admin operations: each one issues a single statement on the live handle
"""
import logging
from typing import Optional

from dbadmin.config import Settings
from dbadmin.db import ddl
from dbadmin.db.connection import ConnectionManager
from dbadmin.db.describe import describe, table_names
from dbadmin.db.errors import StatementError
from dbadmin.db.transcoder import transcode
from dbadmin.models.table import ConnectionStatus, CreateTableArg, Table

logger = logging.getLogger(__name__)


class AdminService:
    """Schema and data operations against the managed connection"""

    def __init__(self, manager: ConnectionManager, settings: Settings):
        self.manager = manager
        self.strict = settings.STRICT_IDENTIFIERS
        self.timeout = settings.statement_timeout
        self.batch_size = settings.FETCH_BATCH_SIZE

    # -- connection ------------------------------------------------------------

    def connect(self, connection_string: str) -> ConnectionStatus:
        self.manager.connect(connection_string)
        return self.manager.status()

    def close(self) -> bool:
        return self.manager.close()

    def status(self) -> ConnectionStatus:
        return self.manager.status()

    # -- reads -----------------------------------------------------------------

    def list_tables(self) -> list[str]:
        with self.manager.reading() as handle:
            with handle.query(handle.list_tables_sql(), self.timeout) as cursor:
                return table_names(cursor, self.batch_size)

    def describe_table(self, table_name: str) -> dict[str, str]:
        ddl.check_identifier(table_name, self.strict, kind="table name")
        with self.manager.reading() as handle:
            with handle.query(handle.describe_sql(table_name), self.timeout) as cursor:
                description = describe(cursor, self.batch_size)
        if not description:
            raise StatementError(f"no such table: {table_name}")
        return description

    def dump_table(self, table_name: str, limit: Optional[int] = None) -> Table:
        sql = ddl.select_all(table_name, limit, self.strict)
        logger.info(sql)
        return self.query(sql)

    def query(self, sql: str) -> Table:
        with self.manager.reading() as handle:
            with handle.query(sql, self.timeout) as cursor:
                return transcode(cursor, self.batch_size)

    # -- writes ----------------------------------------------------------------

    def execute(self, sql: str) -> int:
        with self.manager.reading() as handle:
            return handle.execute(sql, self.timeout)

    def create_table(self, arg: CreateTableArg) -> str:
        sql = ddl.create_table(arg.table_name, arg.fields, self.strict)
        logger.info(sql)
        self.execute(sql)
        return sql

    def drop_table(self, table_name: str) -> str:
        sql = ddl.drop_table(table_name, self.strict)
        logger.info(sql)
        self.execute(sql)
        return sql
