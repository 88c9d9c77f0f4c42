# -*- coding: utf-8 -*-
"""Link builder: absolute web links and SMART app launch links."""

from typing import List, Optional, Tuple

from pydantic import AnyUrl, TypeAdapter, ValidationError

from cds_hooks.builders.errors import LinkValidationError
from cds_hooks.config.constants import LINK_TYPES
from cds_hooks.core.cards import Link

__all__ = [
    "LinkBuilder",
    "is_valid_url",
    "create_absolute_link",
    "create_smart_link",
    "create_guideline_link",
]

_URL = TypeAdapter(AnyUrl)


def is_valid_url(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        _URL.validate_python(value)
    except ValidationError:
        return False
    return True


class LinkBuilder:
    """
    Accumulates link fields; validation runs in ``build()``.

    Example:
        LinkBuilder().with_label("Open app").with_url(url).as_smart("ctx").build()
    """

    def __init__(self):
        self.reset()

    def reset(self) -> "LinkBuilder":
        self._label: Optional[str] = None
        self._url: Optional[str] = None
        self._type: Optional[str] = None
        self._app_context: Optional[str] = None
        return self

    def with_label(self, label: str) -> "LinkBuilder":
        self._label = label
        return self

    def with_url(self, url: str) -> "LinkBuilder":
        self._url = url
        return self

    def with_type(self, link_type: str) -> "LinkBuilder":
        self._type = link_type
        return self

    def as_absolute(self) -> "LinkBuilder":
        self._type = "absolute"
        return self

    def as_smart(self, app_context: Optional[str] = None) -> "LinkBuilder":
        self._type = "smart"
        if app_context is not None:
            self._app_context = app_context
        return self

    def with_app_context(self, app_context: str) -> "LinkBuilder":
        self._app_context = app_context
        return self

    def validate(self) -> List[str]:
        errors: List[str] = []
        if not self._label or not self._label.strip():
            errors.append("label is required")
        if not self._url:
            errors.append("url is required")
        elif not is_valid_url(self._url):
            errors.append("url must be a valid URL")
        if not self._type:
            errors.append("type is required (call as_absolute() or as_smart())")
        elif self._type not in LINK_TYPES:
            errors.append(f"type must be 'absolute' or 'smart', got '{self._type}'")
        if self._app_context is not None and self._type != "smart":
            errors.append("appContext is only valid for SMART links")
        return errors

    def build(self) -> Link:
        errors = self.validate()
        if errors:
            raise LinkValidationError(errors)
        return Link(label=self._label, url=self._url, type=self._type, appContext=self._app_context)

    def try_build(self) -> Tuple[Optional[Link], List[str]]:
        try:
            return self.build(), []
        except LinkValidationError as exc:
            return None, exc.errors


def create_absolute_link(label: str, url: str) -> Link:
    return LinkBuilder().with_label(label).with_url(url).as_absolute().build()


def create_smart_link(label: str, url: str, app_context: Optional[str] = None) -> Link:
    return LinkBuilder().with_label(label).with_url(url).as_smart(app_context).build()


def create_guideline_link(name: str, url: str) -> Link:
    """Absolute link labelled "View <name>"."""
    return create_absolute_link(f"View {name}", url)
