"""User profile loader for loading user preferences from YAML."""
import yaml
from pathlib import Path

from ricebowl.data_layer.exceptions import InputValidationError
from ricebowl.data_layer.models import UserProfile


class UserProfileLoader:
    """Loader for user profile configuration from YAML."""

    def __init__(self, yaml_path: str):
        """Initialize user profile loader from YAML file.

        Args:
            yaml_path: Path to YAML file containing user profile
        """
        self.yaml_path = Path(yaml_path)

    def load(self) -> UserProfile:
        """Load user profile from YAML file.

        Returns:
            UserProfile object

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            KeyError: If required fields are missing
            InputValidationError: If the file, its user section or its
                preferences section is not a mapping
            yaml.YAMLError: If the file is not valid YAML
        """
        with open(self.yaml_path, "r") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise InputValidationError("user_profile", str(self.yaml_path), "expected a YAML mapping")
        user = data["user"]
        if not isinstance(user, dict):
            raise InputValidationError("user", user, "expected a mapping with an id")
        preferences = data.get("preferences") or {}
        if not isinstance(preferences, dict):
            raise InputValidationError("preferences", preferences, "expected a mapping")

        return UserProfile(
            id=str(user["id"]),
            name=str(user.get("name", "")),
            rice_preference=bool(preferences.get("rice_preference", False)),
            dietary_restrictions=[
                str(item) for item in preferences.get("dietary_restrictions", [])
            ],
            cuisine_preference=str(preferences.get("cuisine_preference", "mixed")),
        )
