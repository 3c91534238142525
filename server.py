import uvicorn  # type: ignore

from ward_admin.utils import configure_logging, get_logger

configure_logging()
log = get_logger("ward_admin.server")

if __name__ == "__main__":
    log.info("Running server")
    uvicorn.run("ward_admin.main:app", reload=True, host="127.0.0.1", port=8000)
