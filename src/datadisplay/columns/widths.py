"""Column width, wrap and alignment policy per field kind."""

from datadisplay.fields.schemas import FieldComponentKind, FieldDescriptor, FieldRole

from .schemas import ColumnAlign, WidthPolicy

K = FieldComponentKind

ID_POLICY = WidthPolicy(min_width=200, max_width=250, allow_wrap=False)
BADGE_LIST_POLICY = WidthPolicy(min_width=180, max_width=350, allow_wrap=True)
ADDRESS_POLICY = WidthPolicy(min_width=220, max_width=420, allow_wrap=True)
TEXT_POLICY = WidthPolicy(min_width=150, max_width=320, allow_wrap=True)
LONG_TEXT_POLICY = WidthPolicy(min_width=200, max_width=480, allow_wrap=True)

NUMERIC_POLICY = WidthPolicy(min_width=100, max_width=160, allow_wrap=False)
DATE_POLICY = WidthPolicy(min_width=120, max_width=160, allow_wrap=False)
DATETIME_POLICY = WidthPolicy(min_width=160, max_width=200, allow_wrap=False)
STATUS_POLICY = WidthPolicy(min_width=120, max_width=180, allow_wrap=False)
BOOLEAN_POLICY = WidthPolicy(min_width=80, max_width=120, allow_wrap=False)
MEDIA_POLICY = WidthPolicy(min_width=60, max_width=100, allow_wrap=False)
CONTACT_POLICY = WidthPolicy(min_width=160, max_width=260, allow_wrap=False)

KIND_POLICIES: dict[FieldComponentKind, WidthPolicy] = {
    K.NUMBER: NUMERIC_POLICY,
    K.SLIDER: NUMERIC_POLICY,
    K.CURRENCY: NUMERIC_POLICY,
    K.PERCENTAGE: NUMERIC_POLICY,
    K.RATING: NUMERIC_POLICY,
    K.PASSWORD: NUMERIC_POLICY,
    K.DATE: DATE_POLICY,
    K.DATETIME: DATETIME_POLICY,
    K.DATETIME_LOCAL: DATETIME_POLICY,
    K.STATUS: STATUS_POLICY,
    K.SELECT: STATUS_POLICY,
    K.RADIO: STATUS_POLICY,
    K.COLOR_PICKER: STATUS_POLICY,
    K.CHECKBOX: BOOLEAN_POLICY,
    K.TOGGLE: BOOLEAN_POLICY,
    K.SWITCH: BOOLEAN_POLICY,
    K.ICON: MEDIA_POLICY,
    K.AVATAR: MEDIA_POLICY,
    K.IMAGE: MEDIA_POLICY,
    K.EMAIL: CONTACT_POLICY,
    K.PHONE: CONTACT_POLICY,
    K.URL: CONTACT_POLICY,
    K.MULTISELECT: BADGE_LIST_POLICY,
    K.CHECKBOX_LIST: BADGE_LIST_POLICY,
    K.TOGGLE_GROUP: BADGE_LIST_POLICY,
    K.PICKER: BADGE_LIST_POLICY,
    K.POPUP_PICKER: BADGE_LIST_POLICY,
    K.COMBO: BADGE_LIST_POLICY,
    K.TAG: BADGE_LIST_POLICY,
    K.LANGUAGE: BADGE_LIST_POLICY,
    K.TEXTAREA: LONG_TEXT_POLICY,
    K.MARKDOWN: LONG_TEXT_POLICY,
    K.JSON: LONG_TEXT_POLICY,
    K.LIST_INPUT: LONG_TEXT_POLICY,
    K.CHECKLIST: LONG_TEXT_POLICY,
    K.ARRAY: LONG_TEXT_POLICY,
}

ROLE_POLICIES: dict[FieldRole, WidthPolicy] = {
    FieldRole.STATUS: STATUS_POLICY,
    FieldRole.ENTITY_TYPE: STATUS_POLICY,
    FieldRole.BADGE: BADGE_LIST_POLICY,
    FieldRole.RATING: NUMERIC_POLICY,
    FieldRole.DUEDATE: DATE_POLICY,
    FieldRole.AVATAR: MEDIA_POLICY,
    FieldRole.IMAGE: MEDIA_POLICY,
    FieldRole.ICON: MEDIA_POLICY,
}

ADDRESS_NAMES = ("city", "state", "zip", "zipcode", "zip_code", "postalcode", "postal_code")

RIGHT_ALIGNED = (K.NUMBER, K.SLIDER, K.CURRENCY, K.PERCENTAGE)
CENTER_ALIGNED = (K.CHECKBOX, K.TOGGLE, K.SWITCH, K.ICON, K.AVATAR, K.IMAGE, K.RATING)
SORTABLE_KINDS = (
    K.TEXT,
    K.NAME,
    K.EMAIL,
    K.PHONE,
    K.URL,
    K.NUMBER,
    K.SLIDER,
    K.CURRENCY,
    K.PERCENTAGE,
    K.RATING,
    K.DATE,
    K.DATETIME,
    K.DATETIME_LOCAL,
    K.CHECKBOX,
    K.TOGGLE,
    K.SWITCH,
    K.SELECT,
    K.RADIO,
    K.STATUS,
)


def is_address_like(name: str) -> bool:
    lowered = (name or "").lower()
    return "address" in lowered or lowered in ADDRESS_NAMES


def width_policy(field: FieldDescriptor) -> WidthPolicy:
    """Width policy: role first, then address-like names, then component kind."""
    if field.role_kind in ROLE_POLICIES:
        return ROLE_POLICIES[field.role_kind]
    if is_address_like(field.name):
        return ADDRESS_POLICY
    return KIND_POLICIES.get(field.kind, TEXT_POLICY)


def alignment(field: FieldDescriptor) -> ColumnAlign:
    if field.role_kind == FieldRole.RATING or field.kind in CENTER_ALIGNED:
        return ColumnAlign.CENTER
    if field.kind in RIGHT_ALIGNED:
        return ColumnAlign.RIGHT
    return ColumnAlign.LEFT


def is_sortable(field: FieldDescriptor) -> bool:
    return field.kind in SORTABLE_KINDS
