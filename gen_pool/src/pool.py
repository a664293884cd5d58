"""Node address extraction, pool CIDR derivation and pool manifest rendering.

The three steps run in this order and each one either returns its value or
raises a ``GenPoolError``; a manifest is only rendered once an address has
been found and turned into a CIDR.
"""
import logging
from typing import Optional, Union

import jinja2
from pydantic import ValidationError

from .errors import InvalidFormatError, NotFoundError
from .models import Node, NodeList, PoolConfig

logger = logging.getLogger(__name__)

INTERNAL_IP = "InternalIP"
DEFAULT_POOL_OFFSET = 200
DEFAULT_POOL_MASK = 29

POOL_TEMPLATE = """\
apiVersion: cilium.io/v2alpha1
kind: CiliumLoadBalancerIPPool
metadata:
  name: {{ pool_name }}
spec:
  blocks:
  - cidr: {{ pool_cidr }}
"""

_pool_template = jinja2.Template(
    POOL_TEMPLATE,
    keep_trailing_newline=True,
    undefined=jinja2.StrictUndefined,
)

NodeCollection = Union[NodeList, Node]


def _first_internal_ip(node: Node) -> Optional[str]:
    for addr in node.status.addresses:
        if addr.type == INTERNAL_IP:
            return addr.address
    return None


def _parse_node_list(data: Union[bytes, str]) -> Optional[NodeList]:
    try:
        return NodeList.model_validate_json(data)
    except ValidationError as e:
        logger.debug("Nodes data is not a node list (%d errors)", e.error_count())
        return None


def _parse_node(data: Union[bytes, str]) -> Optional[Node]:
    try:
        return Node.model_validate_json(data)
    except ValidationError as e:
        logger.debug("Nodes data is not a single node (%d errors)", e.error_count())
        return None


def parse_nodes(data: Union[bytes, str]) -> Optional[NodeCollection]:
    """Interpret nodes data as a node list, else as a single node.

    A list is only returned when it holds at least one node. Returns None when
    the data is not a JSON object of either shape.
    """
    node_list = _parse_node_list(data)
    if node_list is not None and node_list.items:
        return node_list
    return _parse_node(data)


def extract_internal_ip(data: Union[bytes, str]) -> str:
    """Return the first InternalIP address in document order.

    Raises NotFoundError when no node carries one or the data cannot be parsed.
    """
    nodes = parse_nodes(data)
    if isinstance(nodes, NodeList):
        for node in nodes.items:
            address = _first_internal_ip(node)
            if address is not None:
                return address
        # A list without any InternalIP still gets a second look as a single node.
        nodes = _parse_node(data)
    if isinstance(nodes, Node):
        address = _first_internal_ip(nodes)
        if address is not None:
            return address
    raise NotFoundError("could not find InternalIP in nodes data")


def compute_pool_cidr(
    ip: str, pool_offset: int = DEFAULT_POOL_OFFSET, pool_mask: int = DEFAULT_POOL_MASK
) -> str:
    """Map x.y.z.w to x.y.255.<pool_offset>/<pool_mask>."""
    parts = ip.split(".")
    if len(parts) != 4 or not all(parts):
        raise InvalidFormatError(f"invalid IP address format: {ip}")
    return f"{parts[0]}.{parts[1]}.255.{pool_offset}/{pool_mask}"


def render_pool(pool: PoolConfig) -> str:
    return _pool_template.render(pool_name=pool.pool_name, pool_cidr=pool.pool_cidr)
