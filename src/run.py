import uvicorn

from newsdesk.core.config import config

if __name__ == "__main__":
    uvicorn.run(
        "newsdesk.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=config.server_reload,
        log_level=config.server_log_level,
    )
