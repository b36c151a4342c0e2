import uvicorn

from complaint_relay.config import LOG_LEVEL, PORT


def main() -> None:
    uvicorn.run("complaint_relay.main:app", host="0.0.0.0", port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
