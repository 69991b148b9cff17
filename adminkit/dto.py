"""Request objects, paging helpers and the form-builder schema."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, NamedTuple


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid integer value: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid integer value: {value!r}") from exc


@dataclass
class Pagination:
    """Page number and size with defaults for missing values."""

    page_index: int = 0
    page_size: int = 0

    def get_page_index(self) -> int:
        if self.page_index <= 0:
            self.page_index = 1
        return self.page_index

    def get_page_size(self) -> int:
        if self.page_size <= 0:
            self.page_size = 10
        return self.page_size


class PageWindow(NamedTuple):
    """Offset and limit selecting one page."""

    offset: int
    limit: int

    def apply(self, items: Sequence[Any]) -> Sequence[Any]:
        return items[self.offset:self.offset + self.limit]


def paginate(page_size: int, page_index: int) -> PageWindow:
    """Offset and limit for a page; the offset never goes negative."""
    offset = max((page_index - 1) * page_size, 0)
    return PageWindow(offset, page_size)


def order_dest(sort: str, desc: bool) -> str:
    """An ORDER BY term for one quoted column."""
    column = '"' + sort.replace('"', '""') + '"'
    return f"{column} DESC" if desc else column


@dataclass
class ObjectById:
    """A request addressing one record by path id, or several on delete."""

    id: int = 0
    ids: list[int] | None = None

    def bind(self, uri_id: Any, ids: Iterable[Any] | None = None, method: str = "GET") -> None:
        self.id = _to_int(uri_id)
        if method.upper() == "DELETE":
            if ids is not None:
                self.ids = [_to_int(i) for i in ids]
            if self.ids:
                return
            if self.ids is None:
                self.ids = []
            if self.id != 0:
                self.ids.append(self.id)

    def get_id(self) -> int | list[int]:
        if self.ids:
            self.ids.append(self.id)
            return self.ids
        return self.id


@dataclass
class ObjectGetReq:
    """A request addressing one record by path id."""

    id: int = 0

    def get_id(self) -> int:
        return self.id


@dataclass
class ObjectDeleteReq:
    """A request deleting the records listed in the body."""

    ids: list[int] | None = None

    def bind(self, ids: Iterable[Any] | None) -> None:
        if ids is not None:
            self.ids = [_to_int(i) for i in ids]
        if self.ids is None:
            self.ids = []

    def get_id(self) -> list[int] | None:
        return self.ids


@dataclass
class GeneralDelDto:
    """Delete request accepting either a single id or a list of ids."""

    id: int = 0
    ids: list[int] = field(default_factory=list)

    def get_ids(self) -> list[int]:
        result: list[int] = []
        if self.id != 0:
            result.append(self.id)
        if self.ids:
            result.extend(i for i in self.ids if i > 0)
        elif self.id > 0:
            result.append(self.id)
        # Never hand back an empty list, which would match every row.
        return result or [0]


@dataclass
class GeneralGetDto:
    """Get request carrying a single id."""

    id: int = 0


def _compact(pairs: Iterable[tuple[str, Any, bool]]) -> dict[str, Any]:
    return {key: value for key, value, omit_empty in pairs if not (omit_empty and not value)}


@dataclass
class Style:
    width: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"width": self.width}


@dataclass
class Option:
    label: str = ""
    value: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "value": self.value}


@dataclass
class Slot:
    prepend: str = ""
    append: str = ""
    list_type: bool = False
    options: list[Option] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return _compact([
            ("prepend", self.prepend, True),
            ("append", self.append, True),
            ("list-type", self.list_type, True),
            ("options", [o.to_dict() for o in self.options], True),
        ])


@dataclass
class FieldConfig:
    label: str = ""
    label_width: Any = None
    show_label: bool = False
    change_tag: bool = False
    tag: str = ""
    tag_icon: str = ""
    required: bool = False
    layout: str = ""
    span: int = 0
    document: str = ""
    reg_list: list[Any] = field(default_factory=list)
    form_id: int = 0
    render_key: int = 0
    default_value: Any = None
    show_tip: bool = False
    button_text: str = ""
    file_size: int = 0
    size_unit: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _compact([
            ("label", self.label, False),
            ("labelWidth", self.label_width, False),
            ("showLabel", self.show_label, False),
            ("changeTag", self.change_tag, False),
            ("tag", self.tag, False),
            ("tagIcon", self.tag_icon, False),
            ("required", self.required, False),
            ("layout", self.layout, False),
            ("span", self.span, False),
            ("document", self.document, False),
            ("regList", list(self.reg_list), False),
            ("formId", self.form_id, False),
            ("renderKey", self.render_key, False),
            ("defaultValue", self.default_value, False),
            ("showTip", self.show_tip, True),
            ("buttonText", self.button_text, True),
            ("fileSize", self.file_size, True),
            ("sizeUnit", self.size_unit, True),
        ])


@dataclass
class Field:
    config: FieldConfig = field(default_factory=FieldConfig)
    slot: Slot = field(default_factory=Slot)
    placeholder: str = ""
    style: Style = field(default_factory=Style)
    clearable: bool = False
    prefix_icon: str = ""
    suffix_icon: str = ""
    maxlength: Any = None
    show_word_limit: bool = False
    readonly: bool = False
    disabled: bool = False
    v_model: str = ""
    action: str = ""
    accept: str = ""
    name: str = ""
    auto_upload: bool = False
    list_type: str = ""
    multiple: bool = False
    filterable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _compact([
            ("__config__", self.config.to_dict(), False),
            ("__slot__", self.slot.to_dict(), False),
            ("placeholder", self.placeholder, True),
            ("style", self.style.to_dict(), False),
            ("clearable", self.clearable, True),
            ("prefix-icon", self.prefix_icon, True),
            ("suffix-icon", self.suffix_icon, True),
            ("maxlength", self.maxlength, False),
            ("show-word-limit", self.show_word_limit, True),
            ("readonly", self.readonly, True),
            ("disabled", self.disabled, False),
            ("__vModel__", self.v_model, False),
            ("action", self.action, True),
            ("accept", self.accept, True),
            ("name", self.name, True),
            ("auto-upload", self.auto_upload, True),
            ("list-type", self.list_type, True),
            ("multiple", self.multiple, True),
            ("filterable", self.filterable, True),
        ])


@dataclass
class AutoForm:
    """A form-builder document."""

    fields: list[Field] = field(default_factory=list)
    form_ref: str = ""
    form_model: str = ""
    size: str = ""
    label_position: str = ""
    label_width: int = 0
    form_rules: str = ""
    gutter: int = 0
    disabled: bool = False
    span: int = 0
    form_btns: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "fields": [f.to_dict() for f in self.fields],
            "formRef": self.form_ref,
            "formModel": self.form_model,
            "size": self.size,
            "labelPosition": self.label_position,
            "labelWidth": self.label_width,
            "formRules": self.form_rules,
            "gutter": self.gutter,
            "disabled": self.disabled,
            "span": self.span,
            "formBtns": self.form_btns,
        }