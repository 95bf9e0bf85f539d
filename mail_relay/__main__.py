"""Run Mail-Relay under uvicorn on HOST:PORT."""

import uvicorn

from mail_relay.app import app, logger, settings


def main():
    logger.info("Backend running on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
