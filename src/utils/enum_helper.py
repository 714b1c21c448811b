"""Enum conversion utilities"""

from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

# Generic type for any Enum subclass
E = TypeVar("E", bound=Enum)


class EnumHelper:
    """
    Parse config strings into Enum members (case-insensitive) and list
    member names for help and error messages.
    """

    @staticmethod
    def from_string(enum_class: Type[E], name: Any, default: Optional[E] = None,
                    aliases: Optional[Dict[str, E]] = None) -> Optional[E]:
        """
        Parse string to Enum member.

        Args:
            enum_class: Enum class to parse into
            name: Member name, any case; a member passes through unchanged
            default: Return value if not found (None = raise)
            aliases: Extra accepted spellings, upper-case keys ("WARNING" -> WARN)

        Returns:
            Enum member or default if provided

        Raises:
            ValueError: Unknown name and no default
        """
        if isinstance(name, enum_class):
            return name

        key = str(name).strip().upper()
        if key in enum_class.__members__:
            return enum_class[key]
        if aliases and key in aliases:
            return aliases[key]

        if default is not None:
            return default
        raise ValueError(
            f"Invalid {enum_class.__name__} name: {name} "
            f"(expected one of {', '.join(EnumHelper.list_names(enum_class, lowercase=True))})"
        )

    @staticmethod
    def list_names(enum_class: Type[E], lowercase: bool = False) -> List[str]:
        """List all Enum member names."""
        if lowercase:
            return [member.name.lower() for member in enum_class]
        return [member.name for member in enum_class]
