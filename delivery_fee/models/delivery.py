from __future__ import annotations

from enum import Enum
from types import MappingProxyType

from delivery_fee.exceptions import InvalidInputError


class City(str, Enum):
    TALLINN = "TALLINN"
    TARTU = "TARTU"
    PARNU = "PARNU"

    @property
    def station_name(self) -> str:
        return STATION_NAMES[self]

    @classmethod
    def parse(cls, value: str) -> City:
        try:
            return cls(value.strip().upper())
        except ValueError as e:
            raise InvalidInputError(value) from e

    @classmethod
    def from_station_name(cls, station_name: str) -> City | None:
        for city, name in STATION_NAMES.items():
            if name == station_name:
                return city
        return None


class VehicleType(str, Enum):
    CAR = "CAR"
    SCOOTER = "SCOOTER"
    BIKE = "BIKE"

    @classmethod
    def parse(cls, value: str) -> VehicleType:
        try:
            return cls(value.strip().upper())
        except ValueError as e:
            raise InvalidInputError(value) from e


STATION_NAMES = MappingProxyType(
    {
        City.TALLINN: "Tallinn-Harku",
        City.TARTU: "Tartu-Tõravere",
        City.PARNU: "Pärnu",
    }
)
