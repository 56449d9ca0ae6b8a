"""Run the redirect service over HTTPS: python -m ip4p_redirect"""

import logging
import sys

import uvicorn

from ip4p_redirect.config import ConfigError, check_startup, load_config

logger = logging.getLogger("ip4p_redirect")


def main() -> None:
    try:
        config = load_config()
        check_startup(config)
    except ConfigError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Error loading config: %s", exc)
        sys.exit(1)

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    logger.info("Starting https server on %s:%d", config.host, config.port)
    uvicorn.run(
        "ip4p_redirect.app:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        ssl_certfile=config.cert_file,
        ssl_keyfile=config.key_file,
        log_level=config.log_level,
    )


if __name__ == "__main__":
    main()
