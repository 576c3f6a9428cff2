from __future__ import annotations

from sqlalchemy import BigInteger, Column, Float, Index, Integer, MetaData, Table

metadata = MetaData()

pings_table = Table(
    "pings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("lat", Float, nullable=False),
    Column("lon", Float, nullable=False),
    Column("observed_ts", BigInteger, nullable=False),
    Index("ix_pings_observed_ts", "observed_ts"),
)
