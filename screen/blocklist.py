"""
Block target configuration.

Provides preset categories of distracting apps and persistence of the
user's selected block targets. The access controller consumes the
resulting list; it never edits it except through update_blocked_apps().
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockTarget:
    """
    One app or site that can be blocked.

    Attributes:
        identifier: Platform-agnostic identifier, e.g. "com.instagram".
        name: Human-readable display name.
        category: Grouping used for display ("app", "website", preset id...).
    """

    identifier: str
    name: str = ""
    category: str = "app"

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("identifier cannot be empty")
        if not self.category:
            raise ValueError("category cannot be empty")

    def to_dict(self) -> Dict[str, str]:
        return {
            "identifier": self.identifier,
            "name": self.name,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlockTarget":
        identifier = data["identifier"]
        return cls(
            identifier=identifier,
            name=data.get("name") or identifier,
            category=data.get("category") or "app",
        )


# Preset block target categories
PRESET_CATEGORIES: Dict[str, Dict[str, Any]] = {
    "social_media": {
        "name": "Social Media",
        "description": "Social networking apps",
        "targets": [
            ("com.instagram", "Instagram"),
            ("com.facebook", "Facebook"),
            ("com.twitter", "X (Twitter)"),
            ("com.zhiliaoapp.musically", "TikTok"),
            ("com.reddit", "Reddit"),
            ("com.snapchat", "Snapchat"),
            ("com.pinterest", "Pinterest"),
            ("com.threads", "Threads"),
        ],
        "default_enabled": True,
    },
    "video_streaming": {
        "name": "Video Streaming",
        "description": "Video and streaming apps",
        "targets": [
            ("com.google.youtube", "YouTube"),
            ("com.netflix", "Netflix"),
            ("com.twitch", "Twitch"),
            ("com.disney.disneyplus", "Disney+"),
            ("com.amazon.primevideo", "Prime Video"),
        ],
        "default_enabled": True,
    },
    "gaming": {
        "name": "Gaming",
        "description": "Games and gaming platforms",
        "targets": [
            ("com.roblox", "Roblox"),
            ("com.discord", "Discord"),
            ("com.supercell.clashroyale", "Clash Royale"),
        ],
        "default_enabled": False,
    },
    "messaging": {
        "name": "Messaging",
        "description": "Chat apps (some may be productive)",
        "targets": [
            ("com.whatsapp", "WhatsApp"),
            ("org.telegram", "Telegram"),
            ("com.facebook.orca", "Messenger"),
        ],
        "default_enabled": False,  # Off by default - may be needed
    },
}


def get_preset_targets(category_id: str) -> List[BlockTarget]:
    """
    Get the block targets of one preset category.

    Args:
        category_id: Key in PRESET_CATEGORIES.

    Returns:
        List of BlockTarget (empty for unknown categories).
    """
    category = PRESET_CATEGORIES.get(category_id)
    if category is None:
        logger.warning(f"Unknown preset category: {category_id}")
        return []
    return [
        BlockTarget(identifier=identifier, name=name, category=category_id)
        for identifier, name in category["targets"]
    ]


def get_default_targets() -> List[BlockTarget]:
    """Block targets from every preset category enabled by default."""
    targets: List[BlockTarget] = []
    for cat_id, cat_data in PRESET_CATEGORIES.items():
        if cat_data.get("default_enabled", False):
            targets.extend(get_preset_targets(cat_id))
    return targets


def dedupe_targets(targets: Iterable[BlockTarget]) -> List[BlockTarget]:
    """Drop targets whose identifier already appeared, keeping order."""
    seen = set()
    unique: List[BlockTarget] = []
    for target in targets:
        if target.identifier in seen:
            logger.debug(f"Dropping duplicate block target {target.identifier}")
            continue
        seen.add(target.identifier)
        unique.append(target)
    return unique


class BlocklistManager:
    """
    Manages persistence and loading of the selected block targets.
    """

    def __init__(self, settings_path: Path):
        """
        Initialize the blocklist manager.

        Args:
            settings_path: Path to the JSON settings file
        """
        self.settings_path = settings_path
        self._targets: Optional[List[BlockTarget]] = None

    def load(self) -> List[BlockTarget]:
        """
        Load block targets from file, or use the defaults if not present.

        Returns:
            Loaded or default block targets
        """
        if self._targets is not None:
            return list(self._targets)

        if self.settings_path.exists():
            try:
                with open(self.settings_path, "r") as f:
                    data = json.load(f)
                targets = [BlockTarget.from_dict(item) for item in data["targets"]]
                self._targets = dedupe_targets(targets)
                logger.info(f"Loaded {len(self._targets)} block targets from {self.settings_path}")
            except (json.JSONDecodeError, KeyError, TypeError, ValueError, OSError) as e:
                logger.warning(f"Invalid blocklist file, using defaults: {e}")
                self._targets = get_default_targets()
        else:
            self._targets = get_default_targets()
            logger.info("Created default blocklist")

        return list(self._targets)

    def save(self, targets: Optional[List[BlockTarget]] = None) -> bool:
        """
        Save block targets to file atomically.

        Uses atomic write (write to temp file, then rename) to prevent
        data corruption if the app crashes during save.

        Args:
            targets: Targets to save (uses cached if None)

        Returns:
            True if saved successfully, False otherwise
        """
        if targets is not None:
            self._targets = dedupe_targets(targets)

        if self._targets is None:
            logger.warning("No blocklist to save")
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            temp_fd, temp_path = tempfile.mkstemp(
                suffix='.tmp',
                prefix='blocklist_',
                dir=self.settings_path.parent
            )

            try:
                with os.fdopen(temp_fd, 'w') as f:
                    json.dump({"targets": [t.to_dict() for t in self._targets]}, f, indent=2)
                os.replace(temp_path, self.settings_path)
                logger.info(f"Saved blocklist to {self.settings_path}")
                return True
            except Exception:
                # Clean up temp file on error
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
                raise

        except (IOError, OSError, PermissionError) as e:
            logger.error(f"Failed to save blocklist: {e}")
            return False

    @staticmethod
    def get_preset_categories() -> Dict[str, Dict[str, Any]]:
        """
        Get information about all preset categories.

        Returns:
            Dictionary of category info for display
        """
        return {
            cat_id: {
                "name": cat_data["name"],
                "description": cat_data["description"],
                "target_count": len(cat_data["targets"]),
                "default_enabled": cat_data.get("default_enabled", False),
            }
            for cat_id, cat_data in PRESET_CATEGORIES.items()
        }
