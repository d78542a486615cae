# Recidiviz - a data platform for criminal justice reform
# Copyright (C) 2026 Recidiviz, Inc.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
# =============================================================================
"""Domain logic entities used in the persistence layer.

Every scraped record is normalized into one of the root entity classes below
before it is matched against stored rows or written.

Note: These classes mirror the SQL Alchemy ORM objects but are kept separate.
This allows these persistence layer objects additional flexibility that the SQL
Alchemy ORM objects can't provide, e.g. nested child collections that are
always replaced in full and photo payloads that are optional on every scrape.
"""
import datetime
from typing import ClassVar, List, Optional, Union

import attr

from blotter.common import attr_validators
from blotter.common.constants.entity_kind import EntityKind


@attr.s(kw_only=True)
class Entity:
    """Base class for all entities, root or child."""

    # Consider Entity abstract and only allow instantiating subclasses
    def __new__(cls, *_, **__):  # type: ignore[no-untyped-def]
        if cls in (Entity, RootEntity):
            raise Exception("Abstract class cannot be instantiated")
        return super().__new__(cls)

    @classmethod
    def get_entity_name(cls) -> str:
        return cls.__name__


@attr.s(kw_only=True)
class RootEntity(Entity):
    """An entity that is the unit of ingestion. Each root entity is recognized
    across scrapes by the value of its |identity_field|."""

    entity_kind: ClassVar[EntityKind]
    identity_field: ClassVar[str]

    def get_identity(self) -> str:
        return getattr(self, self.identity_field)


# Jail roster


@attr.s(kw_only=True)
class RosterCharge(Entity):
    charge_description: Optional[str] = attr.ib(default=None)
    status: Optional[str] = attr.ib(default=None)
    docket_number: Optional[str] = attr.ib(default=None)
    bond_amount: Optional[str] = attr.ib(default=None)
    disp_charge: Optional[str] = attr.ib(default=None)


@attr.s(kw_only=True)
class RosterRecord(RootEntity):
    """A person booked into a jail, as listed on the jail's roster."""

    entity_kind = EntityKind.ROSTER_RECORD
    identity_field = "book_id"

    book_id: str = attr.ib(validator=attr_validators.is_non_empty_str)
    invid: Optional[str] = attr.ib(default=None)
    firstname: Optional[str] = attr.ib(default=None)
    lastname: Optional[str] = attr.ib(default=None)
    middlename: Optional[str] = attr.ib(default=None)
    disp_name: Optional[str] = attr.ib(default=None)
    age: Optional[int] = attr.ib(default=None)
    dob: Optional[datetime.date] = attr.ib(default=None)
    sex: Optional[str] = attr.ib(default=None)
    race: Optional[str] = attr.ib(default=None)
    arrest_date: Optional[datetime.datetime] = attr.ib(default=None)
    agency: Optional[str] = attr.ib(default=None)
    disp_agency: Optional[str] = attr.ib(default=None)
    total_bond_amount: Optional[str] = attr.ib(default=None)
    next_court_date: Optional[datetime.datetime] = attr.ib(default=None)
    released_date: Optional[datetime.datetime] = attr.ib(default=None)

    # Only ever replaces a stored photo. None means "not captured this scrape".
    photo_data: Optional[bytes] = attr.ib(default=None, repr=False)
    charges: List[RosterCharge] = attr.ib(factory=list)


# CAD / dispatch


@attr.s(kw_only=True)
class CadCall(RootEntity):
    """A computer-aided-dispatch call for service."""

    entity_kind = EntityKind.CAD_CALL
    identity_field = "id"

    id: str = attr.ib(validator=attr_validators.is_non_empty_str)
    invid: Optional[str] = attr.ib(default=None)
    starttime: Optional[datetime.datetime] = attr.ib(default=None)
    closetime: Optional[datetime.datetime] = attr.ib(default=None)
    agency: Optional[str] = attr.ib(default=None)
    service: Optional[str] = attr.ib(default=None)
    nature: Optional[str] = attr.ib(default=None)
    address: Optional[str] = attr.ib(default=None)
    geox: Optional[float] = attr.ib(default=None)
    geoy: Optional[float] = attr.ib(default=None)
    marker_details_xml: Optional[str] = attr.ib(default=None)
    rec_key: Optional[str] = attr.ib(default=None)
    icon_url: Optional[str] = attr.ib(default=None)
    icon: Optional[str] = attr.ib(default=None)


# Sex offender registry


@attr.s(kw_only=True)
class Victim(Entity):
    gender: Optional[str] = attr.ib(default=None)
    age_group: Optional[str] = attr.ib(default=None)


@attr.s(kw_only=True)
class Conviction(Entity):
    conviction_text: Optional[str] = attr.ib(default=None)
    registrant_age: Optional[str] = attr.ib(default=None)
    victims: List[Victim] = attr.ib(factory=list)


@attr.s(kw_only=True)
class Alias(Entity):
    last_name: Optional[str] = attr.ib(default=None)
    first_name: Optional[str] = attr.ib(default=None)
    middle_name: Optional[str] = attr.ib(default=None)


@attr.s(kw_only=True)
class Registrant(RootEntity):
    """An entrant on the sex offender registry."""

    entity_kind = EntityKind.REGISTRY_ENTRANT
    identity_field = "registrant_id"

    registrant_id: str = attr.ib(validator=attr_validators.is_non_empty_str)
    oci: Optional[str] = attr.ib(default=None)
    last_name: Optional[str] = attr.ib(default=None)
    first_name: Optional[str] = attr.ib(default=None)
    middle_name: Optional[str] = attr.ib(default=None)
    gender: Optional[str] = attr.ib(default=None)
    tier: Optional[str] = attr.ib(default=None)
    race: Optional[str] = attr.ib(default=None)
    hair_color: Optional[str] = attr.ib(default=None)
    eye_color: Optional[str] = attr.ib(default=None)
    height_inches: Optional[str] = attr.ib(default=None)
    weight_pounds: Optional[str] = attr.ib(default=None)
    address_line_1: Optional[str] = attr.ib(default=None)
    address_line_2: Optional[str] = attr.ib(default=None)
    city: Optional[str] = attr.ib(default=None)
    state: Optional[str] = attr.ib(default=None)
    postal_code: Optional[str] = attr.ib(default=None)
    county: Optional[str] = attr.ib(default=None)
    lat: Optional[float] = attr.ib(default=None)
    lon: Optional[float] = attr.ib(default=None)
    birthdate: Optional[datetime.date] = attr.ib(default=None)
    victim_minors: Optional[int] = attr.ib(default=None)
    victim_adults: Optional[int] = attr.ib(default=None)
    victim_unknown: Optional[int] = attr.ib(default=None)
    registrant_cluster: Optional[str] = attr.ib(default=None)
    photo_url: Optional[str] = attr.ib(default=None)
    distance: Optional[float] = attr.ib(default=None)
    last_changed: Optional[datetime.datetime] = attr.ib(default=None)

    photo_data: Optional[bytes] = attr.ib(default=None, repr=False)
    convictions: List[Conviction] = attr.ib(factory=list)
    aliases: List[Alias] = attr.ib(factory=list)
    markings: List[str] = attr.ib(factory=list)


# Daily bulletin


@attr.s(kw_only=True)
class BulletinReport(RootEntity):
    """One line of a police daily bulletin (arrest, citation, accident or crime
    report). Bulletin rows are append-only."""

    entity_kind = EntityKind.BULLETIN_REPORT
    identity_field = "row_hash"

    # Content-derived identity, stored upper-cased.
    row_hash: str = attr.ib(validator=attr_validators.is_non_empty_str)
    # The bulletin site's own key for the row. Only used to scope the search for
    # logical duplicates.
    site_id: Optional[str] = attr.ib(default=None)
    key: str = attr.ib(validator=attr_validators.is_non_empty_str)
    invid: Optional[str] = attr.ib(default=None)
    location: Optional[str] = attr.ib(default=None)
    name: Optional[str] = attr.ib(default=None)
    crime: Optional[str] = attr.ib(default=None)
    time: Optional[str] = attr.ib(default=None)
    property: Optional[str] = attr.ib(default=None)
    officer: Optional[str] = attr.ib(default=None)
    case: Optional[str] = attr.ib(default=None)
    description: Optional[str] = attr.ib(default=None)
    race: Optional[str] = attr.ib(default=None)
    sex: Optional[str] = attr.ib(default=None)
    lastname: Optional[str] = attr.ib(default=None)
    firstname: Optional[str] = attr.ib(default=None)
    charge: Optional[str] = attr.ib(default=None)
    middlename: Optional[str] = attr.ib(default=None)


# Department of corrections


@attr.s(kw_only=True)
class OffenderSummary(RootEntity):
    entity_kind = EntityKind.OFFENDER_SUMMARY
    identity_field = "offender_number"

    offender_number: str = attr.ib(validator=attr_validators.is_non_empty_str)
    name: Optional[str] = attr.ib(default=None)
    gender: Optional[str] = attr.ib(default=None)
    age: Optional[str] = attr.ib(default=None)


@attr.s(kw_only=True)
class OffenderCharge(Entity):
    supervision_status: Optional[str] = attr.ib(default=None)
    offense_class: Optional[str] = attr.ib(default=None)
    county_of_commitment: Optional[str] = attr.ib(default=None)
    end_date: Optional[datetime.datetime] = attr.ib(default=None)


@attr.s(kw_only=True)
class OffenderDetail(RootEntity):
    entity_kind = EntityKind.OFFENDER_DETAIL
    identity_field = "offender_number"

    offender_number: str = attr.ib(validator=attr_validators.is_non_empty_str)
    location: Optional[str] = attr.ib(default=None)
    offense: Optional[str] = attr.ib(default=None)
    tdd_sdd: Optional[datetime.datetime] = attr.ib(default=None)
    commitment_date: Optional[datetime.datetime] = attr.ib(default=None)
    recall_date: Optional[datetime.datetime] = attr.ib(default=None)
    interview_date: Optional[str] = attr.ib(default=None)
    mandatory_minimum: Optional[str] = attr.ib(default=None)
    decision_type: Optional[str] = attr.ib(default=None)
    decision: Optional[str] = attr.ib(default=None)
    decision_date: Optional[datetime.datetime] = attr.ib(default=None)
    effective_date: Optional[datetime.datetime] = attr.ib(default=None)

    charges: List[OffenderCharge] = attr.ib(factory=list)


IngestRecord = Union[
    RosterRecord,
    CadCall,
    Registrant,
    BulletinReport,
    OffenderSummary,
    OffenderDetail,
]

ROOT_ENTITY_CLASS_BY_KIND = {
    cls.entity_kind: cls
    for cls in (
        RosterRecord,
        CadCall,
        Registrant,
        BulletinReport,
        OffenderSummary,
        OffenderDetail,
    )
}
