#!/usr/bin/env python3
"""Run the dbadmin web server."""
from dbadmin.config import get_settings


def main():
    import uvicorn

    settings = get_settings()
    print(f"""
    dbadmin server
      URL:        http://{settings.API_HOST}:{settings.API_PORT}
      API Docs:   http://{settings.API_HOST}:{settings.API_PORT}/docs
      Driver:     {settings.DB_DRIVER}
      Hot Reload: {settings.SERVER_RELOAD}
    """)

    uvicorn.run(
        "server.app:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.SERVER_RELOAD,
    )


if __name__ == "__main__":
    main()
