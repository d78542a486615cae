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
"""Define the ORM schema objects that map directly to the database.

The below schema uses only generic SQLAlchemy types, and therefore should be
portable between database implementations.

String column lengths are the source of truth for the maximum length of every
scraped text field: the record normalizer truncates incoming values to the
length of the column they are written to.

NOTE: Parent tables are keyed by the identity of the scraped record (book id,
call id, registrant id, row hash, offender number). Child tables have surrogate
integer keys and are always deleted and re-inserted in full whenever their
parent is written, so no other table should reference a child row.
"""
from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeMeta, declarative_base

# Base class for all table classes
BlotterBase: DeclarativeMeta = declarative_base()


# Jail roster


class JailInmate(BlotterBase):
    """Table containing one row per booking listed on a jail roster."""

    __tablename__ = "jail_inmates"

    book_id = Column(String(50), primary_key=True)
    invid = Column(String(50))
    firstname = Column(String(100))
    lastname = Column(String(100))
    middlename = Column(String(100))
    disp_name = Column(String(255))
    age = Column(Integer)
    dob = Column(Date)
    sex = Column(String(50))
    race = Column(String(100))
    arrest_date = Column(DateTime)
    agency = Column(String(255))
    disp_agency = Column(String(255))
    total_bond_amount = Column(String(100))
    next_court_date = Column(DateTime)
    released_date = Column(DateTime)
    last_updated = Column(DateTime)


class JailCharge(BlotterBase):
    __tablename__ = "jail_charges"

    charge_id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(
        String(50), ForeignKey("jail_inmates.book_id"), nullable=False, index=True
    )
    charge_description = Column(String(500))
    status = Column(String(100))
    docket_number = Column(String(100))
    bond_amount = Column(String(100))
    disp_charge = Column(String(500))


class JailPhoto(BlotterBase):
    __tablename__ = "jail_photos"

    book_id = Column(String(50), ForeignKey("jail_inmates.book_id"), primary_key=True)
    photo_data = Column(LargeBinary, nullable=False)
    last_updated = Column(DateTime)


# CAD / dispatch


class CadCall(BlotterBase):
    __tablename__ = "cad_handler"

    id = Column(String(50), primary_key=True)
    invid = Column(String(50))
    starttime = Column(DateTime)
    closetime = Column(DateTime)
    agency = Column(String(255))
    service = Column(String(255))
    nature = Column(String(500))
    address = Column(String(500))
    geox = Column(Float)
    geoy = Column(Float)
    marker_details_xml = Column(Text)
    rec_key = Column(String(100))
    icon_url = Column(String(500))
    icon = Column(String(255))


# Sex offender registry


class SexOffenderRegistrant(BlotterBase):
    __tablename__ = "sexoffender_registrants"

    registrant_id = Column(String(50), primary_key=True)
    oci = Column(String(50))
    last_name = Column(String(100))
    first_name = Column(String(100))
    middle_name = Column(String(100))
    gender = Column(String(50))
    tier = Column(String(50))
    race = Column(String(100))
    hair_color = Column(String(50))
    eye_color = Column(String(50))
    height_inches = Column(String(50))
    weight_pounds = Column(String(50))
    address_line_1 = Column(String(255))
    address_line_2 = Column(String(255))
    city = Column(String(100))
    state = Column(String(50))
    postal_code = Column(String(20))
    county = Column(String(100))
    lat = Column(Float)
    lon = Column(Float)
    birthdate = Column(Date)
    victim_minors = Column(Integer)
    victim_adults = Column(Integer)
    victim_unknown = Column(Integer)
    registrant_cluster = Column(String(100))
    photo_url = Column(String(500))
    distance = Column(Float)
    last_changed = Column(DateTime)
    photo_data = Column(LargeBinary)
    updated_at = Column(DateTime)


class SexOffenderConviction(BlotterBase):
    __tablename__ = "sexoffender_convictions"

    conviction_id = Column(Integer, primary_key=True, autoincrement=True)
    registrant_id = Column(
        String(50),
        ForeignKey("sexoffender_registrants.registrant_id"),
        nullable=False,
        index=True,
    )
    conviction_text = Column(String(1000))
    registrant_age = Column(String(50))


class SexOffenderConvictionVictim(BlotterBase):
    __tablename__ = "sexoffender_conviction_victims"

    victim_id = Column(Integer, primary_key=True, autoincrement=True)
    conviction_id = Column(
        Integer,
        ForeignKey("sexoffender_convictions.conviction_id"),
        nullable=False,
        index=True,
    )
    gender = Column(String(50))
    age_group = Column(String(100))


class SexOffenderAlias(BlotterBase):
    __tablename__ = "sexoffender_aliases"

    alias_id = Column(Integer, primary_key=True, autoincrement=True)
    registrant_id = Column(
        String(50),
        ForeignKey("sexoffender_registrants.registrant_id"),
        nullable=False,
        index=True,
    )
    last_name = Column(String(100))
    first_name = Column(String(100))
    middle_name = Column(String(100))


class SexOffenderSkinMarking(BlotterBase):
    __tablename__ = "sexoffender_skin_markings"

    marking_id = Column(Integer, primary_key=True, autoincrement=True)
    registrant_id = Column(
        String(50),
        ForeignKey("sexoffender_registrants.registrant_id"),
        nullable=False,
        index=True,
    )
    marking_value = Column(String(500))


# Daily bulletin


class DailyBulletinArrest(BlotterBase):
    """Append-only table of daily bulletin rows. event_time is derived from the
    free-text time column by a separate backfill and is null on insert."""

    __tablename__ = "daily_bulletin_arrests"

    row_hash = Column(String(50), primary_key=True)
    site_id = Column(String(50))
    invid = Column(String(50))
    key = Column(String(50), nullable=False)
    location = Column(String(500))
    name = Column(String(255))
    crime = Column(String(500))
    time = Column(String(100))
    property = Column(String(255))
    officer = Column(String(255))
    case = Column(String(1500))
    description = Column(String(1000))
    race = Column(String(100))
    sex = Column(String(50))
    lastname = Column(String(100))
    firstname = Column(String(100))
    charge = Column(String(500))
    middlename = Column(String(100))
    lat = Column(Float)
    lon = Column(Float)
    event_time = Column(DateTime)

    __table_args__ = (
        Index("ix_daily_bulletin_arrests_site_id", "site_id"),
        Index("ix_daily_bulletin_arrests_key_event_time", "key", "event_time"),
    )


# Department of corrections


class OffenderSummary(BlotterBase):
    __tablename__ = "offender_summary"

    offender_number = Column(String(50), primary_key=True)
    name = Column(String(255))
    gender = Column(String(50))
    age = Column(String(20))


class OffenderDetail(BlotterBase):
    __tablename__ = "offender_detail"

    offender_number = Column(String(50), primary_key=True)
    location = Column(String(255))
    offense = Column(String(500))
    tdd_sdd = Column(DateTime)
    commitment_date = Column(DateTime)
    recall_date = Column(DateTime)
    interview_date = Column(String(100))
    mandatory_minimum = Column(String(100))
    decision_type = Column(String(100))
    decision = Column(String(255))
    decision_date = Column(DateTime)
    effective_date = Column(DateTime)


class OffenderCharge(BlotterBase):
    __tablename__ = "offender_charges"

    charge_id = Column(Integer, primary_key=True, autoincrement=True)
    offender_number = Column(
        String(50),
        ForeignKey("offender_detail.offender_number"),
        nullable=False,
        index=True,
    )
    supervision_status = Column(String(100))
    offense_class = Column(String(100))
    county_of_commitment = Column(String(100))
    end_date = Column(DateTime)
