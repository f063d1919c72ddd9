"""Logic for merging script and markup candidates into the documentation object."""

import logging
from collections.abc import Iterable
from dataclasses import replace
from pathlib import PurePath
from typing import Any, TypeVar

from sveltedoc.comment_parser import ParsedComment, comment_fields
from sveltedoc.declarations import (
    CALLABLE_BUCKETS,
    ScriptDeclarations,
)
from sveltedoc.dependency_analyzer import DependencyAnalyzer
from sveltedoc.errors import DuplicateNameError
from sveltedoc.markup_analyzer import MarkupCandidates
from sveltedoc.models import (
    SvelteComponentDoc,
    SvelteComponentItem,
    SvelteComputedItem,
    SvelteDataItem,
    SvelteEventItem,
    SvelteItem,
    SvelteMethodItem,
    SvelteSlotItem,
)
from sveltedoc.options import ExtractOptions

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=SvelteItem)

NAME_KEYWORD = "name"
HIDDEN_VISIBILITIES = {"private", "protected"}


def _item_comment(item: SvelteItem) -> dict[str, Any]:
    return {
        "description": item.description,
        "visibility": item.visibility,
        "keywords": item.keywords,
    }


def merge_by_name(items: Iterable[ItemT]) -> list[ItemT]:
    """Collapse items sharing a name into the first one.

    The first occurrence keeps its fields; a later occurrence only lends its
    comment when the first one has none.
    """
    merged: dict[str, ItemT] = {}
    for item in items:
        first = merged.get(item.name)
        if first is None:
            merged[item.name] = item
        elif first.keywords is None and item.keywords is not None:
            merged[item.name] = replace(first, **_item_comment(item))
    return list(merged.values())


def merge_slots(slots: Iterable[SvelteSlotItem]) -> list[SvelteSlotItem]:
    """Collapse slots by name, collecting the parameters of every occurrence."""
    slots = list(slots)
    merged = merge_by_name(slots)
    by_name = {slot.name: slot for slot in merged}
    params: dict[str, dict[str, Any]] = {slot.name: {} for slot in merged}
    for slot in slots:
        for param in slot.parameters or ():
            params[slot.name].setdefault(param.name, param)
    return [
        replace(slot, parameters=tuple(params[name].values()) or None)
        for name, slot in by_name.items()
    ]


def ensure_unique(category: str, items: Iterable[SvelteItem]) -> None:
    """Raise DuplicateNameError when two items of a category share a name."""
    seen: dict[str, SvelteItem] = {}
    for item in items:
        first = seen.get(item.name)
        if first is not None:
            raise DuplicateNameError(category, item.name, first.loc, item.loc)
        seen[item.name] = item


def _start(item: SvelteItem) -> int:
    return item.loc.start if item.loc is not None else 0


class DocAssembler:
    """Turns classified declarations and markup candidates into a document."""

    def __init__(self, options: ExtractOptions) -> None:
        """Initialize with the options of the run."""
        self.options = options

    def assemble(
        self,
        declarations: ScriptDeclarations,
        markup: MarkupCandidates,
    ) -> SvelteComponentDoc:
        """Build the finished component documentation object."""
        data = [
            SvelteDataItem(
                name=declarations.public_name(decl.name),
                loc=decl.loc,
                type=decl.type,
                value=decl.value,
                **comment_fields(decl.comment),
            )
            for decl in declarations.data
        ]
        computed = self._computed(declarations)
        callables = self._callables(declarations)
        components = merge_by_name(
            [
                SvelteComponentItem(
                    name=decl.name,
                    loc=decl.loc,
                    value=decl.value,
                    **comment_fields(decl.comment),
                )
                for decl in declarations.components
            ]
            + markup.components
        )
        script_events = [
            SvelteEventItem(
                name=decl.name, loc=decl.loc, **comment_fields(decl.comment)
            )
            for decl in declarations.events
        ]
        events = merge_by_name(sorted(script_events + markup.events, key=_start))
        slots = merge_slots(markup.slots)
        refs = list(markup.refs)

        ensure_unique("data", data)
        ensure_unique("computed", computed)
        for bucket in CALLABLE_BUCKETS:
            ensure_unique(bucket, callables[bucket])
        ensure_unique("refs", refs)

        comment = declarations.component_comment or markup.component_comment
        doc = SvelteComponentDoc(
            name=self._component_name(comment),
            version=self.options.dialect_version,
            description=comment.description if comment else None,
            data=self._finish(data),
            computed=self._finish(computed),
            components=self._finish(components),
            events=self._finish(events),
            slots=self._finish(slots),
            refs=self._finish(refs),
            methods=self._finish(callables["methods"]),
            actions=self._finish(callables["actions"]),
            helpers=self._finish(callables["helpers"]),
            transitions=self._finish(callables["transitions"]),
        )
        logger.info(
            "Assembled component '%s': %d data, %d computed, %d events, %d slots",
            doc.name or "<anonymous>",
            len(doc.data),
            len(doc.computed),
            len(doc.events),
            len(doc.slots),
        )
        return doc

    def _computed(self, declarations: ScriptDeclarations) -> list[SvelteComputedItem]:
        analyzer = None
        if declarations.source is not None:
            analyzer = DependencyAnalyzer(
                declarations.source, declarations.known_names()
            )
        items = []
        for decl in declarations.computed:
            dependencies = decl.dependencies
            if dependencies is None:
                dependencies = (
                    analyzer.analyze(decl.expression, decl.name) if analyzer else ()
                )
            items.append(
                SvelteComputedItem(
                    name=declarations.public_name(decl.name),
                    loc=decl.loc,
                    dependencies=tuple(
                        declarations.public_name(dep) for dep in dependencies
                    ),
                    **comment_fields(decl.comment),
                )
            )
        return items

    def _callables(
        self, declarations: ScriptDeclarations
    ) -> dict[str, list[SvelteMethodItem]]:
        buckets: dict[str, list[SvelteMethodItem]] = {b: [] for b in CALLABLE_BUCKETS}
        for decl in declarations.callables:
            buckets[decl.bucket].append(
                SvelteMethodItem(
                    name=declarations.public_name(decl.name),
                    loc=decl.loc,
                    args=decl.args,
                    **comment_fields(decl.comment),
                )
            )
        return buckets

    def _component_name(self, comment: ParsedComment | None) -> str | None:
        if comment is not None:
            keyword = comment.first_keyword(NAME_KEYWORD)
            if keyword is not None and keyword.description:
                return keyword.description.split()[0]
        if self.options.file_name:
            return PurePath(self.options.file_name).stem
        return None

    def _is_hidden(self, item: SvelteItem) -> bool:
        if self.options.ignore_private and item.visibility in HIDDEN_VISIBILITIES:
            return True
        ignored = self.options.ignore_keywords
        return bool(ignored) and any(kw.name in ignored for kw in item.keywords or ())

    def _strip_locations(self, item: ItemT) -> ItemT:
        if isinstance(item, SvelteSlotItem) and item.parameters:
            item = replace(
                item,
                parameters=tuple(replace(p, loc=None) for p in item.parameters),
            )
        return replace(item, loc=None)

    def _finish(self, items: Iterable[ItemT]) -> tuple[ItemT, ...]:
        kept = []
        for item in items:
            if self._is_hidden(item):
                logger.debug("Dropping hidden item '%s'", item.name)
                continue
            if not self.options.include_source_locations:
                item = self._strip_locations(item)
            kept.append(item)
        return tuple(kept)
