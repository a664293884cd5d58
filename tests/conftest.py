import json
import logging

import pytest

from tests.common import node


@pytest.fixture(autouse=True)
def reset_gen_pool_logger():
    yield
    logger = logging.getLogger("gen_pool")
    logger.handlers = []
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def single_node_json():
    return json.dumps(
        node(("InternalIP", "192.168.1.100"), ("Hostname", "test-node"))
    ).encode()


@pytest.fixture
def nodes_file(tmp_path, single_node_json):
    path = tmp_path / "nodes.json"
    path.write_bytes(single_node_json)
    return path
