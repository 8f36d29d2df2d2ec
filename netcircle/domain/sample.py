"""Sample network used for new accounts and resets."""

from netcircle.domain.person import Link, Person
from netcircle.domain.snapshot import NetworkSnapshot

_PEOPLE = [
    ("me", "Me", "me", "The center of my social universe"),
    ("mom", "Mom", "family", "Always supportive, calls every Sunday"),
    ("dad", "Dad", "family", "Wise advice, loves hiking"),
    ("sister", "Sarah", "family", "Younger sister, lives in Berlin"),
    ("brother", "Max", "family", "Older brother, software engineer"),
    ("boss", "Thomas", "work", "Team lead, very organized"),
    ("colleague1", "Anna", "work", "Desk neighbor, coffee buddy"),
    ("colleague2", "Michael", "work", "Backend developer, chess enthusiast"),
    ("colleague3", "Lisa", "work", "Designer, great at presentations"),
    ("bestfriend", "Chris", "friends", "Best friend since university, knows everything"),
    ("friend1", "Julia", "friends", "Met at yoga class, very positive energy"),
    ("friend2", "David", "friends", "Gaming buddy, works in finance"),
    ("friend3", "Emma", "friends", "Book club friend, recommends great reads"),
    ("neighbor", "Mr. Schmidt", "acquaintances", "Friendly neighbor, waters plants when away"),
    ("gym", "Fitness Tom", "acquaintances", "See at the gym, good workout tips"),
]

_LINKS = [
    # family
    ("me", "mom", 9),
    ("me", "dad", 8),
    ("me", "sister", 8),
    ("me", "brother", 7),
    ("mom", "dad", 10),
    ("sister", "brother", 6),
    ("mom", "sister", 8),
    ("mom", "brother", 8),
    ("dad", "sister", 7),
    ("dad", "brother", 7),
    # work
    ("me", "boss", 5),
    ("me", "colleague1", 6),
    ("me", "colleague2", 5),
    ("me", "colleague3", 4),
    ("boss", "colleague1", 4),
    ("boss", "colleague2", 4),
    ("boss", "colleague3", 4),
    ("colleague1", "colleague2", 5),
    ("colleague1", "colleague3", 6),
    # friends
    ("me", "bestfriend", 10),
    ("me", "friend1", 6),
    ("me", "friend2", 7),
    ("me", "friend3", 5),
    ("bestfriend", "friend2", 4),
    ("friend1", "friend3", 3),
    # acquaintances
    ("me", "neighbor", 2),
    ("me", "gym", 2),
    # cross-group ties, these make bridges
    ("brother", "colleague2", 3),
    ("bestfriend", "sister", 4),
]


def sample_snapshot(self_name: str = "Me") -> NetworkSnapshot:
    """Build a fresh copy of the sample network."""
    nodes = [
        Person(id=pid, name=self_name if pid == "me" else name, group=group, details=details)
        for pid, name, group, details in _PEOPLE
    ]
    links = [Link(source=a, target=b, strength=s) for a, b, s in _LINKS]
    return NetworkSnapshot(nodes=nodes, links=links)
