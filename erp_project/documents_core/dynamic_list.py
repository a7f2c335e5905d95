"""
Dynamic list filtering.

Turns a declarative list request

    {
        "filter_roles": [
            {"field_key": "amount", "comparator": "bigger_than",
             "value": "100", "condition": "AND", "index": 1},
        ],
        "column_sort_by": "estimate_date",
        "sort_order": "desc",
        "page": 1,
        "page_size": 12,
    }

into a tenant-scoped queryset plus pagination and filter metadata.
"""
import logging
import math
from decimal import Decimal, InvalidOperation

from django.db.models import Q
from django.utils.dateparse import parse_date

from .exceptions import ErrorCode, ValidationError
from .forms import ListFilterForm

logger = logging.getLogger(__name__)


# field type → how a filter value is coerced before it reaches the ORM
def _to_text(value):
    return "" if value is None else str(value)


def _to_number(value):
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(value)


def _to_date(value):
    if hasattr(value, "isoformat"):
        return value
    parsed = parse_date(str(value))
    if parsed is None:
        raise ValueError(value)
    return parsed


def _to_boolean(value):
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "yes")


FIELD_TYPES = {
    "text": _to_text,
    "number": _to_number,
    "date": _to_date,
    "boolean": _to_boolean,
}


class ListField:
    """A filterable/sortable column: public key → ORM lookup path."""

    def __init__(self, key, path, field_type="text"):
        self.key = key
        self.path = path
        self.field_type = field_type

    def coerce(self, value):
        return FIELD_TYPES[self.field_type](value)


def _empty(field, value):
    lookup = Q(**{f"{field.path}__isnull": True})
    if field.field_type == "text":
        lookup |= Q(**{field.path: ""})
    return lookup


COMPARATORS = {
    "equals": lambda field, value: Q(**{field.path: value}),
    "not_equal": lambda field, value: ~Q(**{field.path: value}),
    "contain": lambda field, value: Q(**{f"{field.path}__icontains": value}),
    "not_contain": lambda field, value: ~Q(**{f"{field.path}__icontains": value}),
    "bigger_than": lambda field, value: Q(**{f"{field.path}__gt": value}),
    "bigger_or_equals": lambda field, value: Q(**{f"{field.path}__gte": value}),
    "smaller_than": lambda field, value: Q(**{f"{field.path}__lt": value}),
    "smaller_or_equals": lambda field, value: Q(**{f"{field.path}__lte": value}),
    "empty": _empty,
    "not_empty": lambda field, value: ~_empty(field, value),
}

# Comparators that ignore the role value
VALUELESS_COMPARATORS = {"empty", "not_empty"}


def _is_key(value, mapping):
    return isinstance(value, str) and value in mapping


def _role_index(role):
    # Roles without an index keep their place at the front
    try:
        return int(role.get("index") or 0)
    except (TypeError, ValueError):
        raise ValidationError(
            ErrorCode.VALIDATION_ERROR,
            {"errors": {"filter_roles": "Role index must be an integer."}},
        )


class DynamicListFilter:
    """
    Declarative filter roles + sort column over one model.
    Tenant scoping is applied by `build_queryset` before any role.
    """

    def __init__(self, fields, filter_roles=None, column_sort_by=None,
                 sort_order="desc", default_sort=None):
        self.fields = {field.key: field for field in fields}
        self.filter_roles = list(filter_roles or [])
        self.column_sort_by = column_sort_by
        self.sort_order = sort_order
        self.default_sort = default_sort
        self.validate()
        self.filter_roles.sort(key=_role_index)

    def validate(self):
        unknown_fields = sorted(
            {str(role.get("field_key")) for role in self.filter_roles
             if not _is_key(role.get("field_key"), self.fields)}
        )
        if unknown_fields:
            raise ValidationError(
                ErrorCode.FILTER_ROLES_FIELDS_NOT_FOUND,
                {"field_keys": unknown_fields},
            )
        unknown_comparators = sorted(
            {str(role.get("comparator")) for role in self.filter_roles
             if not _is_key(role.get("comparator"), COMPARATORS)}
        )
        if unknown_comparators:
            raise ValidationError(
                ErrorCode.FILTER_ROLES_COMPARATOR_INVALID,
                {"comparators": unknown_comparators},
            )
        if self.column_sort_by and self.column_sort_by not in self.fields:
            raise ValidationError(
                ErrorCode.SORT_COLUMN_NOT_FOUND,
                {"column_sort_by": self.column_sort_by},
            )

    def _role_lookup(self, role):
        field = self.fields[role["field_key"]]
        comparator = role["comparator"]
        value = role.get("value")
        if comparator not in VALUELESS_COMPARATORS:
            try:
                value = field.coerce(value)
            except ValueError:
                raise ValidationError(
                    ErrorCode.FILTER_ROLES_VALUE_INVALID,
                    {"field_key": field.key, "value": role.get("value")},
                )
        return COMPARATORS[comparator](field, value)

    def roles_lookup(self):
        # Roles combine left to right, each one joined to the
        # previous result with its own condition (AND/OR)
        lookup = None
        for role in self.filter_roles:
            role_lookup = self._role_lookup(role)
            if lookup is None:
                lookup = role_lookup
            elif str(role.get("condition", "AND")).upper() == "OR":
                lookup = lookup | role_lookup
            else:
                lookup = lookup & role_lookup
        return lookup

    def ordering(self):
        prefix = "-" if self.sort_order == "desc" else ""
        columns = []
        sort_field = self.fields.get(self.column_sort_by or self.default_sort)
        if sort_field is not None:
            columns.append(f"{prefix}{sort_field.path}")
        # id always closes the ordering so pages never overlap
        columns.append(f"{prefix}id")
        return columns

    def build_queryset(self, queryset):
        """`queryset` must already be scoped to the tenant."""
        lookup = self.roles_lookup()
        if lookup is not None:
            queryset = queryset.filter(lookup)
        return queryset.order_by(*self.ordering())

    def response_meta(self):
        return {
            "filter_roles": self.filter_roles,
            "column_sort_by": self.column_sort_by,
            "sort_order": self.sort_order,
        }


def paginate(queryset, page, page_size):
    """
    Slice one page out of `queryset`.
    `page` is 1-based here and zero-based once converted to `page_index`.
    """
    page_index = page - 1
    total = queryset.count()
    offset = page_index * page_size
    results = list(queryset[offset:offset + page_size])
    return results, {
        "page": page,
        "page_size": page_size,
        "total": total,
        "total_pages": math.ceil(total / page_size) if total else 0,
    }


class DynamicListService:
    def dynamic_list(self, fields, list_filter, default_sort=None):
        """Validate the raw list request and build its DynamicListFilter."""
        list_filter = dict(list_filter or {})
        form = ListFilterForm(data=list_filter)
        cleaned = form.cleaned_filter()

        filter_roles = list_filter.get("filter_roles") or []
        if not isinstance(filter_roles, (list, tuple)) or not all(
            isinstance(role, dict) for role in filter_roles
        ):
            raise ValidationError(
                ErrorCode.VALIDATION_ERROR,
                {"errors": {"filter_roles": "Must be a list of roles."}},
            )

        dynamic_filter = DynamicListFilter(
            fields,
            filter_roles=filter_roles,
            column_sort_by=cleaned["column_sort_by"],
            sort_order=cleaned["sort_order"],
            default_sort=default_sort,
        )
        logger.debug(
            "[dynamic_list] filter built.",
            extra={"filter_meta": dynamic_filter.response_meta()},
        )
        return dynamic_filter, cleaned["page"], cleaned["page_size"]

    def paginated_list(self, queryset, fields, list_filter, default_sort=None):
        dynamic_filter, page, page_size = self.dynamic_list(
            fields, list_filter, default_sort=default_sort
        )
        results, pagination = paginate(
            dynamic_filter.build_queryset(queryset), page, page_size
        )
        return {
            "results": results,
            "pagination": pagination,
            "filter_meta": dynamic_filter.response_meta(),
        }
