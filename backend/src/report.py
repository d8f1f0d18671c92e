from typing import List, Optional


class Source:
    def __init__(self, id: int, name: str, pets=()):
        self.id = id
        self.name = name
        self.pets = set(pets)


class Encounter:
    def __init__(self, name: str):
        self.name = name


class Fight:
    """An already fetched fight, as handed over by the log provider"""

    def __init__(
        self,
        source: Source,
        events: List[dict],
        start_time: int,
        end_time: int,
        encounter: Optional[Encounter] = None,
        spec: Optional[str] = None,
    ):
        self.source = source
        self.events = events
        self.start_time = start_time
        self.end_time = end_time
        self.encounter = encounter or Encounter("Unknown")
        self.spec = spec

    @property
    def duration(self):
        return self.end_time - self.start_time
