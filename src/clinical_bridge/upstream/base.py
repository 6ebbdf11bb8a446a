# ============================================================================
# src/clinical_bridge/upstream/base.py
# ============================================================================
"""
Base model for upstream payloads
- Every field optional
- camelCase aliases matching the upstream JSON
- Unknown fields ignored
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class UpstreamModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )
