"""
Structured results extracted by the host model
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class FileLocationResult(BaseModel):
    """File location the user is referring to"""
    model_config = ConfigDict(populate_by_name=True)

    file_location: str = Field(..., min_length=1, alias="fileLocation")


def parse_file_location(obj: Any) -> Optional[str]:
    """
    Extract a file location from a generate_object() result.

    Accepts the model itself, a plain dict, or a wrapper carrying the
    generated object under "object".

    Returns:
        The file location, or None if the result does not match the schema
    """
    if isinstance(obj, FileLocationResult):
        return obj.file_location

    if isinstance(obj, dict) and "object" in obj:
        obj = obj["object"]
    elif hasattr(obj, "object"):
        obj = obj.object

    if isinstance(obj, FileLocationResult):
        return obj.file_location

    try:
        return FileLocationResult.model_validate(obj).file_location
    except ValidationError:
        return None
