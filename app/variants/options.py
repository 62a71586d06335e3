"""Option types and option sets.

An option set is a plain tuple of ``OptionType``. Its order fixes the position
of each option's value inside a combination tuple.
"""
import uuid
from dataclasses import dataclass

from app.variants.errors import MalformedOptionSetError

OPTION_ROLES = ("color", "size", "generic")


@dataclass(frozen=True)
class OptionType:
    id: str
    name: str
    values: tuple
    role: str = "generic"
    saved: bool = True

    @property
    def is_color(self):
        return self.role == "color"


def new_option_id():
    return uuid.uuid4().hex[:12]


def role_for_name(name):
    """Derive the semantic role from a display name.

    Only called when an option is first authored; afterwards the role is
    carried on the option itself.
    """
    key = (name or "").strip().lower()
    if key in ("color", "colour"):
        return "color"
    if key == "size":
        return "size"
    return "generic"


def validate_role(role):
    if role not in OPTION_ROLES:
        raise MalformedOptionSetError(
            f"Unknown option role: {role!r} (expected one of {', '.join(OPTION_ROLES)})"
        )
    return role


def make_option(name, values, role=None, option_id=None, saved=True):
    if role is None:
        role = role_for_name(name)
    validate_role(role)
    return OptionType(
        id=option_id or new_option_id(),
        name=(name or "").strip(),
        values=tuple(values),
        role=role,
        saved=saved,
    )


def placeholder_option(option_id=None):
    """An option mid-creation: no name yet and a single empty value."""
    return make_option("", ("",), role="generic", option_id=option_id, saved=False)


def validate_option(option):
    validate_role(option.role)
    if not option.saved:
        return option

    if not option.name:
        raise MalformedOptionSetError("Option name is required.")
    if not option.values:
        raise MalformedOptionSetError(f"Option {option.name!r} has no values.")

    seen = set()
    for value in option.values:
        if not isinstance(value, str) or not value.strip():
            raise MalformedOptionSetError(
                f"Option {option.name!r} has a blank value."
            )
        if value in seen:
            raise MalformedOptionSetError(
                f"Option {option.name!r} lists {value!r} more than once."
            )
        seen.add(value)
    return option


def validate_option_set(options):
    ids = set()
    names = set()
    for option in options:
        validate_option(option)
        if option.id in ids:
            raise MalformedOptionSetError(f"Duplicate option id: {option.id!r}")
        key = option.name.lower()
        if key in names:
            raise MalformedOptionSetError(
                f"Option {option.name!r} is defined more than once."
            )
        ids.add(option.id)
        names.add(key)
    return tuple(options)


def has_color_option(options):
    return any(option.is_color for option in options)


def option_index(options, name):
    key = (name or "").strip().lower()
    for i, option in enumerate(options):
        if option.name.lower() == key:
            return i
    return None
