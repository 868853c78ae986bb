import logging


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for the Pose Lights agent.
    """

    # Convert "INFO" -> logging.INFO etc.
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Configure root logger.
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # ultralytics logs every inference; keep it quiet unless DEBUG is requested.
    if numeric_level > logging.DEBUG:
        logging.getLogger("ultralytics").setLevel(logging.WARNING)
