"""WhatsApp address (JID) helpers"""

import re

USER_SUFFIX = "@s.whatsapp.net"
GROUP_SUFFIX = "@g.us"

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(phone: str) -> str:
    """Turn a human-typed phone number into a contact JID.

    "(62) 812-3456" -> "628123456@s.whatsapp.net". Already suffixed
    addresses pass through untouched.
    """
    if USER_SUFFIX in phone:
        return phone
    return f"{_NON_DIGITS.sub('', phone)}{USER_SUFFIX}"


def normalize_group(group: str) -> str:
    """Append the group suffix unless it is already there."""
    if GROUP_SUFFIX in group:
        return group
    return f"{group}{GROUP_SUFFIX}"
