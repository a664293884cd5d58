import os
import logging
from typing import Optional

import click
from pydantic import ValidationError
from pythonjsonlogger.json import JsonFormatter

from gen_pool.src.errors import GenPoolError
from gen_pool.src.kubernetes import KubernetesNodeSource
from gen_pool.src.models import GenPoolConfig, PoolConfig
from gen_pool.src import pool

logger = logging.getLogger("gen_pool")


class PoolGenerator:
    def __init__(self, config: GenPoolConfig):
        self.config = config
        self._init_logs()

    def _init_logs(self):
        logHandler = logging.StreamHandler()
        formatter = JsonFormatter("{name}{levelname}{asctime}{message}", style="{")
        logHandler.setFormatter(formatter)
        logger.handlers = [logHandler]
        logger.setLevel(self.config.log_level.upper())

    def read_nodes(self) -> bytes:
        if self.config.from_cluster:
            return KubernetesNodeSource(self.config.context).get_nodes()
        try:
            with open(self.config.nodes, "rb") as f:
                return f.read()
        except OSError as e:
            raise GenPoolError(f"Error reading nodes file: {e}") from e

    def build(self, data: bytes) -> str:
        try:
            internal_ip = pool.extract_internal_ip(data)
        except GenPoolError as e:
            raise type(e)(f"Error extracting internal IP: {e}") from e
        logger.info("Found InternalIP %s", internal_ip)

        try:
            pool_cidr = pool.compute_pool_cidr(
                internal_ip, self.config.pool_offset, self.config.pool_mask
            )
        except GenPoolError as e:
            raise type(e)(f"Error computing pool CIDR: {e}") from e
        logger.info("Derived pool CIDR %s", pool_cidr)

        return pool.render_pool(
            PoolConfig(pool_name=self.config.pool_name, pool_cidr=pool_cidr)
        )

    def write(self, manifest: str):
        try:
            with click.open_file(self.config.output, "w") as f:
                f.write(manifest)
        except OSError as e:
            raise GenPoolError(f"Error writing output: {e}") from e
        logger.info(
            "Wrote pool %s to %s", self.config.pool_name, self.config.output
        )

    def run(self):
        manifest = self.build(self.read_nodes())
        self.write(manifest)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--nodes",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to JSON file containing nodes data.",
)
@click.option(
    "--from-cluster",
    is_flag=True,
    default=False,
    help="Read nodes from the Kubernetes API instead of a file.",
)
@click.option(
    "--context",
    default=None,
    help="Kubeconfig context to use with --from-cluster.",
)
@click.option(
    "--pool-name",
    required=True,
    help="Name for the CiliumLoadBalancerIPPool resource.",
)
@click.option(
    "--output",
    default="-",
    show_default=True,
    help="Output file path (- for stdout).",
)
@click.option(
    "--pool-offset",
    type=click.IntRange(0, 255),
    default=pool.DEFAULT_POOL_OFFSET,
    show_default=True,
    help="Last octet of the pool address.",
)
@click.option(
    "--pool-mask",
    type=click.IntRange(0, 32),
    default=pool.DEFAULT_POOL_MASK,
    show_default=True,
    help="CIDR mask for the pool.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=lambda: os.getenv("LOG_LEVEL", "INFO"),
    help="Log level (default: $LOG_LEVEL or INFO).",
)
def main(
    nodes: Optional[str],
    from_cluster: bool,
    context: Optional[str],
    pool_name: str,
    output: str,
    pool_offset: int,
    pool_mask: int,
    log_level: str,
):
    """Generate a CiliumLoadBalancerIPPool manifest from a node's InternalIP."""
    if bool(nodes) == from_cluster:
        raise click.UsageError("exactly one of --nodes or --from-cluster is required")
    try:
        config = GenPoolConfig(
            nodes=nodes,
            from_cluster=from_cluster,
            context=context,
            pool_name=pool_name,
            output=output,
            pool_offset=pool_offset,
            pool_mask=pool_mask,
            log_level=log_level,
        )
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    generator = PoolGenerator(config)
    try:
        generator.run()
    except GenPoolError as e:
        logger.debug("Pool generation failed: %s", e)
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()
