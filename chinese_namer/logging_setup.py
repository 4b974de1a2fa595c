import os
import logging


def setup_logging(log_file: str = "logs/chinese_namer.log", level: int = logging.INFO) -> str:
    """Configure root logging to a file under logs/ plus the console."""
    log_dir = os.path.dirname(log_file)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler()
        ]
    )
    logging.info('Started logging')
    return log_file
