"""Canned records encoded by ``recordcsv example``."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["Address", "Person", "Phone", "sample_people"]


@dataclass
class Address:
    kind: str
    organization: str = ""
    street1: str = ""
    street2: str = ""
    city: str = ""
    state: str = ""
    code: str = ""


@dataclass
class Phone:
    kind: str
    nation_code: str = ""
    area_code: str = ""
    prefix: str = ""
    suffix: str = ""
    ext: str = ""


@dataclass
class Person:
    name: str = field(metadata={"csv": "Name"})
    id: int = field(metadata={"csv": "ID"})
    address: dict[str, Address] = field(default_factory=dict, metadata={"csv": "Address"})
    phone: dict[str, Phone] = field(default_factory=dict, metadata={"csv": "Phone"})
    tags: list[str] = field(default_factory=list, metadata={"csv": "Tags"})


def sample_people() -> list[Person]:
    """Return the two canned people written by the example command."""

    return [
        Person(
            name="Jack Straw",
            id=420,
            address={
                "Work": Address(
                    kind="Work",
                    organization="City Hall",
                    street1="544 N. Main",
                    city="Wichita",
                    state="KS",
                    code="67202",
                )
            },
            phone={"Work": Phone(kind="Work", area_code="316", prefix="942", suffix="4482")},
            tags=["Sante Fe", "Cheyenne", "Tuscon"],
        ),
        Person(
            name="Sugar Magnolia",
            id=71,
            address={
                "Work": Address(
                    kind="Work",
                    organization="Preservation Hall",
                    street1="726 St. Peters St.",
                    city="New Orleans",
                    state="LA",
                    code="70116",
                )
            },
            phone={"Work": Phone(kind="Work", area_code="504", prefix="522", suffix="2841")},
            tags=["jazz", "french quarter", "live music", "education"],
        ),
    ]
