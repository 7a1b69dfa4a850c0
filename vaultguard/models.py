"""
Entry and document types of the vault.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class StrengthCategory(Enum):
    """Password strength buckets, each with its display colour."""

    VERY_WEAK = "#f80000"
    WEAK = "#FF3500"
    MODERATE = "#ff8000"
    STRONG = "#60b700"
    VERY_STRONG = "#00ad3f"

    @property
    def color(self) -> str:
        return self.value

    @classmethod
    def from_points(cls, points: int) -> 'StrengthCategory':
        """Map a strength score to its category."""
        if points <= 30:
            return cls.VERY_WEAK
        if points <= 60:
            return cls.WEAK
        if points < 90:
            return cls.MODERATE
        if points < 120:
            return cls.STRONG
        return cls.VERY_STRONG

    @classmethod
    def from_name(cls, name: Optional[str]) -> 'StrengthCategory':
        """Parse a stored category name; unknown names fall back to WEAK."""
        try:
            return cls[name]
        except KeyError:
            return cls.WEAK


@dataclass(eq=False)
class Entry:
    """
    One stored credential.

    Entries compare by identity: two entries with the same title are still
    different entries.
    """
    title: str
    username: str = ""
    website: str = ""
    email: str = ""
    one_time_password_seed: str = ""
    password: str = ""
    favourite: bool = False
    compromised: bool = False
    strength_category: StrengthCategory = StrengthCategory.WEAK
    icon: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if self.title is None:
            raise ValueError("Entry title must not be None")
        for name in ("username", "website", "email", "one_time_password_seed", "password"):
            if getattr(self, name) is None:
                setattr(self, name, "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'title': self.title,
            'username': self.username,
            'website': self.website,
            'email': self.email,
            'oneTimePasswordSeed': self.one_time_password_seed,
            'password': self.password,
            'favourite': self.favourite,
            'compromised': self.compromised,
            'strengthCategory': self.strength_category.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Entry':
        """Create from dictionary."""
        return cls(
            title=data['title'],
            username=data.get('username', ""),
            website=data.get('website', ""),
            email=data.get('email', ""),
            one_time_password_seed=data.get('oneTimePasswordSeed', ""),
            password=data.get('password', ""),
            favourite=bool(data.get('favourite', False)),
            compromised=bool(data.get('compromised', False)),
            strength_category=StrengthCategory.from_name(data.get('strengthCategory')),
        )

    def visible_fields(self) -> Dict[str, str]:
        """Non-empty fields in display order, keyed by their label."""
        labelled = (
            ("Username", self.username),
            ("Website", self.website),
            ("Email", self.email),
            ("Password", self.password),
            ("TOTP", self.one_time_password_seed),
        )
        return {label: value for label, value in labelled if value}


@dataclass
class VaultDocument:
    """The decrypted plaintext of one vault file."""
    account_name: str
    account_password: str
    entries: List[Entry] = field(default_factory=list)

    def to_json(self) -> str:
        data = {
            'accountName': self.account_name,
            'accountPassword': self.account_password,
            'entries': [e.to_dict() for e in self.entries],
        }
        return json.dumps(data, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> 'VaultDocument':
        data = json.loads(text)
        return cls(
            account_name=data['accountName'],
            account_password=data['accountPassword'],
            entries=[Entry.from_dict(e) for e in data.get('entries', [])],
        )
