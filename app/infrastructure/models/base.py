"""Base Pydantic model configuration for infrastructure models."""

from pydantic import BaseModel, ConfigDict


class InfrastructureModel(BaseModel):
    """Base model for infrastructure data exchanged with clients.

    Provides standard Pydantic configuration for:
    - Accepting field names or aliases
    - Validation on assignment
    - Creating instances from attribute-bearing objects
    """

    model_config = ConfigDict(
        use_enum_values=True,  # Serialize enums as their values
        populate_by_name=True,
        validate_assignment=True,
        from_attributes=True,
    )
