"""Field validators for upload inputs."""

from typing import Any, Optional

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 255
LOCATION_MAX_LENGTH = 100
EDITIONS_MIN = 1
EDITIONS_MAX = 1000


def validate_asset_title(title: Any) -> str:
    """Validate asset title (3-120 characters)."""
    if not isinstance(title, str):
        raise ValueError("Asset title is required")
    if len(title) < TITLE_MIN_LENGTH:
        raise ValueError(f"Asset title must be at least {TITLE_MIN_LENGTH} characters")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Asset title must not exceed {TITLE_MAX_LENGTH} characters")
    return title


def validate_asset_description(description: Optional[str]) -> Optional[str]:
    """Validate optional asset description."""
    if description is None:
        return None
    if not isinstance(description, str):
        raise ValueError("Asset description must be a string")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(
            f"Asset description must not exceed {DESCRIPTION_MAX_LENGTH} characters"
        )
    return description


def validate_asset_location(location: Optional[str]) -> Optional[str]:
    """Validate optional asset location."""
    if location is None:
        return None
    if not isinstance(location, str):
        raise ValueError("Asset location must be a string")
    if len(location) > LOCATION_MAX_LENGTH:
        raise ValueError(f"Asset location must not exceed {LOCATION_MAX_LENGTH} characters")
    return location


def validate_editions(editions: Optional[int]) -> Optional[int]:
    """Validate number of editions (integer between 1 and 1000)."""
    if editions is None:
        return None
    # bool is an int subclass
    if isinstance(editions, bool) or not isinstance(editions, int):
        raise ValueError("Editions must be an integer")
    if editions < EDITIONS_MIN:
        raise ValueError(f"Editions must be at least {EDITIONS_MIN}")
    if editions > EDITIONS_MAX:
        raise ValueError(f"Editions must not exceed {EDITIONS_MAX}")
    return editions


def validate_contract_id(contract_id: Any) -> str:
    """Validate target collection identifier."""
    if not isinstance(contract_id, str) or not contract_id:
        raise ValueError("Contract ID is required")
    return contract_id
