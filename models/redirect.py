# models/redirect.py

from dataclasses import dataclass


@dataclass(frozen=True)
class RedirectEntry:
    """A source URL -> destination URL pair served by the CDN."""
    source: str
    destination: str

    def to_dict(self) -> dict:
        return {'source': self.source, 'destination': self.destination}

    @classmethod
    def from_dict(cls, data: dict) -> "RedirectEntry":
        """Accepts both the lowercase and the capitalised key spellings."""
        source = data.get('source', data.get('Source'))
        destination = data.get('destination', data.get('Destination'))
        return cls(source=source, destination=destination)
