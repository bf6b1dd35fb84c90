import logging
import sys


def setup_logging(level=logging.INFO, log_file=None):
    """Console (stdout) e, opcionalmente, arquivo."""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Chamadas repetidas não duplicam handlers
    logger.handlers.clear()

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                                  datefmt='%H:%M:%S')
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
