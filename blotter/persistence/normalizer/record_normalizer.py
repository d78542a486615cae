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
"""Converts raw scraped payloads into the persistence layer entities.

Every text field is silently truncated to the length of the column it is
stored in, so over-long scraped text never fails a write. Records that are
missing the fields defining their identity, or that carry values which cannot
be parsed, are rejected individually and dropped from the batch.
"""
import logging
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
)

import attr
from sqlalchemy import Table

from blotter.common import str_field_utils
from blotter.common.constants.entity_kind import EntityKind
from blotter.persistence import entities
from blotter.persistence.database import schema
from blotter.persistence.errors import BatchValidationError, RecordValidationError
from blotter.persistence.normalizer.normalizer_utils import (
    RawRecord,
    fn,
    parse_identifier,
    parse_object_list,
    parse_opt_date,
    parse_opt_datetime,
    parse_opt_float,
    parse_opt_int,
    parse_photo,
    parse_str,
    parse_str_list,
)
from blotter.persistence.normalizer.row_identity import (
    compute_row_hash,
    normalize_row_hash,
)

_TABLE_BY_ENTITY_CLASS: Dict[Type[entities.Entity], Type[schema.BlotterBase]] = {
    entities.RosterRecord: schema.JailInmate,
    entities.RosterCharge: schema.JailCharge,
    entities.CadCall: schema.CadCall,
    entities.Registrant: schema.SexOffenderRegistrant,
    entities.Conviction: schema.SexOffenderConviction,
    entities.Victim: schema.SexOffenderConvictionVictim,
    entities.Alias: schema.SexOffenderAlias,
    entities.BulletinReport: schema.DailyBulletinArrest,
    entities.OffenderSummary: schema.OffenderSummary,
    entities.OffenderDetail: schema.OffenderDetail,
    entities.OffenderCharge: schema.OffenderCharge,
}


@attr.s(frozen=True)
class NormalizedBatch:
    """The valid records of a batch, in input order, and the number of raw
    records that were rejected."""

    records: List[entities.IngestRecord] = attr.ib()
    rejected_count: int = attr.ib()


def normalize_batch(
    entity_kind: EntityKind, raw_records: Any
) -> NormalizedBatch:
    """Normalizes every record in |raw_records|. Invalid records are logged and
    dropped; a batch that is not a list at all is rejected as a whole."""
    if not isinstance(raw_records, list):
        raise BatchValidationError(
            f"Expected a list of {entity_kind.value} records, found "
            f"{type(raw_records).__name__}"
        )

    records = []
    rejected_count = 0
    for raw_record in raw_records:
        try:
            records.append(normalize_record(entity_kind, raw_record))
        except RecordValidationError as e:
            logging.warning("Dropping record from batch: %s", e)
            rejected_count += 1
    return NormalizedBatch(records=records, rejected_count=rejected_count)


def normalize_record(entity_kind: EntityKind, raw_record: Any) -> entities.IngestRecord:
    """Converts one raw payload into the root entity for |entity_kind|, with all
    text truncated to its column's maximum length."""
    if not isinstance(raw_record, Mapping):
        raise RecordValidationError(
            f"expected an object, found {type(raw_record).__name__}",
            entity_kind,
            raw_record,
        )

    converter = _CONVERTER_BY_KIND[entity_kind]
    try:
        entity = converter(RawRecord(raw_record))
        return _truncate_to_columns(entity)
    except (ValueError, TypeError) as e:
        raise RecordValidationError(str(e), entity_kind, raw_record) from e


def _required_identifier(field_name: str, raw: RawRecord) -> str:
    identifier = fn(parse_identifier, field_name, raw)
    if not identifier:
        raise ValueError(f"missing required field [{field_name}]")
    return identifier


def _text_fields(
    raw: RawRecord, field_names: Iterable[str]
) -> Dict[str, Optional[str]]:
    return {name: fn(parse_str, name, raw) for name in field_names}


def _convert_roster_record(raw: RawRecord) -> entities.RosterRecord:
    charges = [
        entities.RosterCharge(
            **_text_fields(
                charge,
                (
                    "charge_description",
                    "status",
                    "docket_number",
                    "bond_amount",
                    "disp_charge",
                ),
            )
        )
        for charge in fn(parse_object_list, "charges", raw, default=[])
    ]
    return entities.RosterRecord(
        book_id=_required_identifier("book_id", raw),
        age=fn(parse_opt_int, "age", raw),
        dob=fn(parse_opt_date, "dob", raw),
        arrest_date=fn(parse_opt_datetime, "arrest_date", raw),
        next_court_date=fn(parse_opt_datetime, "next_court_date", raw),
        released_date=fn(parse_opt_datetime, "released_date", raw),
        photo_data=fn(parse_photo, "photo_data", raw),
        charges=charges,
        **_text_fields(
            raw,
            (
                "invid",
                "firstname",
                "lastname",
                "middlename",
                "disp_name",
                "sex",
                "race",
                "agency",
                "disp_agency",
                "total_bond_amount",
            ),
        ),
    )


def _convert_cad_call(raw: RawRecord) -> entities.CadCall:
    return entities.CadCall(
        id=_required_identifier("id", raw),
        starttime=fn(parse_opt_datetime, "starttime", raw),
        closetime=fn(parse_opt_datetime, "closetime", raw),
        geox=fn(parse_opt_float, "geox", raw),
        geoy=fn(parse_opt_float, "geoy", raw),
        **_text_fields(
            raw,
            (
                "invid",
                "agency",
                "service",
                "nature",
                "address",
                "marker_details_xml",
                "rec_key",
                "icon_url",
                "icon",
            ),
        ),
    )


def _convert_conviction(raw: RawRecord) -> entities.Conviction:
    victims = [
        entities.Victim(**_text_fields(victim, ("gender", "age_group")))
        for victim in fn(parse_object_list, "victims", raw, default=[])
    ]
    return entities.Conviction(
        victims=victims,
        **_text_fields(raw, ("conviction_text", "registrant_age")),
    )


def _convert_registrant(raw: RawRecord) -> entities.Registrant:
    convictions = [
        _convert_conviction(conviction)
        for conviction in fn(parse_object_list, "conviction_list", raw, default=[])
    ]
    aliases = [
        entities.Alias(
            **_text_fields(alias, ("last_name", "first_name", "middle_name"))
        )
        for alias in fn(parse_object_list, "alias_list", raw, default=[])
    ]
    return entities.Registrant(
        registrant_id=_required_identifier("registrant_id", raw),
        lat=fn(parse_opt_float, "lat", raw),
        lon=fn(parse_opt_float, "lon", raw),
        distance=fn(parse_opt_float, "distance", raw),
        birthdate=fn(parse_opt_date, "birthdate", raw),
        victim_minors=fn(parse_opt_int, "victim_minors", raw),
        victim_adults=fn(parse_opt_int, "victim_adults", raw),
        victim_unknown=fn(parse_opt_int, "victim_unknown", raw),
        last_changed=fn(parse_opt_datetime, "last_changed", raw),
        photo_data=fn(parse_photo, "photo_data", raw),
        convictions=convictions,
        aliases=aliases,
        markings=fn(parse_str_list, "markings", raw, default=[]),
        **_text_fields(
            raw,
            (
                "oci",
                "last_name",
                "first_name",
                "middle_name",
                "gender",
                "tier",
                "race",
                "hair_color",
                "eye_color",
                "height_inches",
                "weight_pounds",
                "address_line_1",
                "address_line_2",
                "city",
                "state",
                "postal_code",
                "county",
                "registrant_cluster",
                "photo_url",
            ),
        ),
    )


def _convert_bulletin_report(raw: RawRecord) -> entities.BulletinReport:
    text = _text_fields(
        raw,
        (
            "invid",
            "location",
            "name",
            "crime",
            "time",
            "property",
            "officer",
            "case",
            "description",
            "race",
            "sex",
            "lastname",
            "firstname",
            "charge",
            "middlename",
        ),
    )
    key = fn(parse_str, "key", raw)
    if str_field_utils.is_placeholder(key):
        raise ValueError("missing required field [key]")

    # Scrapers send the row identity they computed as 'id'. When it is absent,
    # derive it the same way from the stable fields of the row.
    row_hash = fn(parse_identifier, "id", raw)
    if not row_hash:
        row_hash = compute_row_hash(
            key=key, name=text["name"], time=text["time"], location=text["location"]
        )

    site_id = fn(parse_identifier, "site_id", raw)
    return entities.BulletinReport(
        row_hash=normalize_row_hash(row_hash),
        site_id=site_id,
        key=key,
        **text,
    )


def _convert_offender_summary(raw: RawRecord) -> entities.OffenderSummary:
    return entities.OffenderSummary(
        offender_number=_required_identifier("OffenderNumber", raw),
        name=fn(parse_str, "Name", raw),
        gender=fn(parse_str, "Gender", raw),
        age=fn(parse_str, "Age", raw),
    )


def _convert_offender_detail(raw: RawRecord) -> entities.OffenderDetail:
    charges = [
        entities.OffenderCharge(
            supervision_status=fn(parse_str, "SupervisionStatus", charge),
            offense_class=fn(parse_str, "OffenseClass", charge),
            county_of_commitment=fn(parse_str, "CountyOfCommitment", charge),
            end_date=fn(parse_opt_datetime, "EndDate", charge),
        )
        for charge in fn(parse_object_list, "Charges", raw, default=[])
    ]
    return entities.OffenderDetail(
        offender_number=_required_identifier("OffenderNumber", raw),
        location=fn(parse_str, "Location", raw),
        offense=fn(parse_str, "Offense", raw),
        tdd_sdd=fn(parse_opt_datetime, "TDD_SDD", raw),
        commitment_date=fn(parse_opt_datetime, "CommitmentDate", raw),
        recall_date=fn(parse_opt_datetime, "RecallDate", raw),
        interview_date=fn(parse_str, "InterviewDate", raw),
        mandatory_minimum=fn(parse_str, "MandatoryMinimum", raw),
        decision_type=fn(parse_str, "DecisionType", raw),
        decision=fn(parse_str, "Decision", raw),
        decision_date=fn(parse_opt_datetime, "DecisionDate", raw),
        effective_date=fn(parse_opt_datetime, "EffectiveDate", raw),
        charges=charges,
    )


_CONVERTER_BY_KIND: Dict[EntityKind, Callable[[RawRecord], entities.RootEntity]] = {
    EntityKind.ROSTER_RECORD: _convert_roster_record,
    EntityKind.CAD_CALL: _convert_cad_call,
    EntityKind.REGISTRY_ENTRANT: _convert_registrant,
    EntityKind.BULLETIN_REPORT: _convert_bulletin_report,
    EntityKind.OFFENDER_SUMMARY: _convert_offender_summary,
    EntityKind.OFFENDER_DETAIL: _convert_offender_detail,
}


def column_max_length(table: Table, column_name: str) -> Optional[int]:
    """Returns the declared length of a String column, or None if the column is
    unbounded or does not exist."""
    column = table.columns.get(column_name)
    if column is None:
        return None
    return getattr(column.type, "length", None)


def _truncate_strings(values: Sequence[str], max_length: Optional[int]) -> List[str]:
    return [str_field_utils.truncate(value, max_length) for value in values]


def _truncate_to_columns(entity: entities.Entity) -> Any:
    """Returns a copy of |entity| (and, recursively, its children) with every
    str field truncated to the length of the column that stores it."""
    table = _TABLE_BY_ENTITY_CLASS[type(entity)].__table__
    changes: Dict[str, Any] = {}
    for field in attr.fields(type(entity)):
        value = getattr(entity, field.name)
        if isinstance(value, str):
            changes[field.name] = str_field_utils.truncate(
                value, column_max_length(table, field.name)
            )
        elif field.name == "markings":
            changes[field.name] = _truncate_strings(
                value,
                column_max_length(
                    schema.SexOffenderSkinMarking.__table__, "marking_value"
                ),
            )
        elif isinstance(value, list):
            changes[field.name] = [_truncate_to_columns(child) for child in value]
    return attr.evolve(entity, **changes)
