"""Pandera schema for a snapshot frame handed to persistence."""

import pandera as pa
from pandera import Column, Check


snapshot_schema = pa.DataFrameSchema(
    {
        "id": Column(str, Check.str_length(min_value=1), nullable=False),
        "manager_id": Column(str, nullable=False),
        "name": Column(str, nullable=True),
        "title": Column(str, nullable=True),
        "fte": Column(float, Check.greater_than_or_equal_to(0)),
        "location": Column(str, nullable=True),
        "job_family": Column(str, nullable=True),
        "management_level": Column(str, nullable=True),
    },
    strict=False,
    coerce=True,
)
