from typing import Optional

from pydantic import BaseModel, Field, field_validator


class NodeAddress(BaseModel):
    type: str = ""
    address: str = ""

    @field_validator("type", "address", mode="before")
    @classmethod
    def _null_strings(cls, value):
        return "" if value is None else value


class NodeStatus(BaseModel):
    addresses: list[NodeAddress] = Field(default_factory=list)

    @field_validator("addresses", mode="before")
    @classmethod
    def _null_addresses(cls, value):
        return [] if value is None else value


class Node(BaseModel):
    status: NodeStatus = Field(default_factory=NodeStatus)

    @field_validator("status", mode="before")
    @classmethod
    def _null_status(cls, value):
        return {} if value is None else value


class NodeList(BaseModel):
    items: list[Node] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _null_items(cls, value):
        return [] if value is None else value


class PoolConfig(BaseModel):
    pool_name: str
    pool_cidr: str


class GenPoolConfig(BaseModel):
    nodes: Optional[str] = None
    from_cluster: bool = False
    context: Optional[str] = None
    pool_name: str = Field(min_length=1)
    output: str = "-"
    pool_offset: int = 200
    pool_mask: int = 29
    log_level: str = "INFO"
