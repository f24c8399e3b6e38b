# services/profile-service/src/apps/core/services/query.py
"""
Filter Translation

Turns filter specifications into a ``Q`` over ``Profile``. Trait, certification
and work history fields become ``id__in`` subqueries so the same filters run
on every database backend.
"""

from typing import Dict, Iterable, Tuple

from django.db.models import Q, QuerySet

from apps.core.exceptions import ValidationError
from apps.core.filters import ExactMatch, Filter, Range, SetMembership
from apps.core.models import Certification, ProfileTag, WorkHistory

PROFILE_COLUMNS = {'role', 'is_available', 'total_flight_hours', 'created_at', 'last_name'}

TAG_FIELDS = {
    'skills': ProfileTag.Category.SKILL,
    'aircraft_types': ProfileTag.Category.AIRCRAFT_TYPE,
    'languages': ProfileTag.Category.LANGUAGE,
    'preferred_locations': ProfileTag.Category.LOCATION,
}

RELATED_FIELDS = {
    'certifications': (Certification, {'name', 'verification_status', 'issue_date'}),
    'work_history': (WorkHistory, {'start_date', 'end_date', 'position_title'}),
}


def _column_lookup(column: str, spec: Filter) -> Dict:
    if isinstance(spec, ExactMatch):
        return {column: spec.value}
    if isinstance(spec, SetMembership):
        return {f'{column}__in': list(spec.values)}
    lookup = {}
    if spec.gte is not None:
        lookup[f'{column}__gte'] = spec.gte
    if spec.lte is not None:
        lookup[f'{column}__lte'] = spec.lte
    return lookup


def _split_related(field: str) -> Tuple[str, str]:
    relation, _, column = field.partition('.')
    if relation not in RELATED_FIELDS or column not in RELATED_FIELDS[relation][1]:
        raise ValidationError(f"Unsupported filter field: {field}", field=field)
    return relation, column


def _related_subquery(spec: Filter) -> QuerySet:
    relation, column = _split_related(spec.field)
    model = RELATED_FIELDS[relation][0]
    lookup = _column_lookup(column, spec)
    for constraint in getattr(spec, 'constraints', ()):
        constraint_relation, constraint_column = _split_related(constraint.field)
        if constraint_relation != relation:
            raise ValidationError(
                f"Constraint {constraint.field} does not apply to {spec.field}",
                field=constraint.field
            )
        lookup.update(_column_lookup(constraint_column, constraint))
    return model.objects.filter(**lookup).values('profile_id')


def _tag_subquery(spec: Filter) -> QuerySet:
    if isinstance(spec, Range):
        raise ValidationError(f"Range is not supported on {spec.field}", field=spec.field)
    lookup = {'category': TAG_FIELDS[spec.field]}
    lookup.update(_column_lookup('value', spec))
    for constraint in getattr(spec, 'constraints', ()):
        if constraint.field != 'languages.proficiency' or spec.field != 'languages':
            raise ValidationError(
                f"Constraint {constraint.field} does not apply to {spec.field}",
                field=constraint.field
            )
        lookup['level'] = constraint.value
    return ProfileTag.objects.filter(**lookup).values('profile_id')


def filter_to_q(spec: Filter) -> Q:
    """Translate a single filter specification."""
    if spec.field in PROFILE_COLUMNS:
        if getattr(spec, 'constraints', ()):
            raise ValidationError(f"Constraints are not supported on {spec.field}", field=spec.field)
        return Q(**_column_lookup(spec.field, spec))
    if spec.field in TAG_FIELDS:
        return Q(id__in=_tag_subquery(spec))
    return Q(id__in=_related_subquery(spec))


def build_profile_query(filters: Iterable[Filter]) -> Q:
    """All filters must hold."""
    query = Q()
    for spec in filters:
        query &= filter_to_q(spec)
    return query
