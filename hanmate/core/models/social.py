"""Mocked social panel data."""
from dataclasses import dataclass


@dataclass(frozen=True)
class NearbyPerson:
    name: str
    age: int
    area: str
    interest: str


# Demo data only, there is no matching behind it
NEARBY_PEOPLE: tuple[NearbyPerson, ...] = (
    NearbyPerson(name="김순자", age=74, area="광진구", interest="성당 친구"),
    NearbyPerson(name="박영호", age=71, area="성동구", interest="아침 산책"),
    NearbyPerson(name="이미영", age=73, area="송파구", interest="독서 모임"),
)
