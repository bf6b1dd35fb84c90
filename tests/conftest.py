import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    # main() reconfigura o logger raiz; cada teste começa com o estado original
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
