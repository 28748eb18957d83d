"""Database layer — connection manager, driver seam, transcoding and DDL."""

from dbadmin.db.connection import ConnectionManager, ConnectionState
from dbadmin.db.driver import SQLiteDriver, get_driver
from dbadmin.db.transcoder import encode_scalar, transcode

__all__ = [
    "ConnectionManager", "ConnectionState",
    "SQLiteDriver", "get_driver",
    "encode_scalar", "transcode",
]
