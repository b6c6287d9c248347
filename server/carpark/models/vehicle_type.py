import enum


class VehicleType(enum.Enum):
    Small = "Small"
    Medium = "Medium"
    Large = "Large"

    @classmethod
    def parse(cls, text):
        """Case-insensitive lookup by name. Returns None when nothing matches."""
        if not isinstance(text, str):
            return None
        wanted = text.strip().lower()
        for member in cls:
            if member.name.lower() == wanted:
                return member
        return None
