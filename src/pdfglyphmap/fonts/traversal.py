# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Discovery of the font resources a page can draw with.

Fonts are found in:
- Page-level Resources/Font
- Form XObjects (Resources/XObject/* with Subtype /Form)
- Tiling Patterns (Resources/Pattern/* with PatternType 1)
- Type3 font Resources
- Annotation Appearance Streams (Annots/*/AP/{N,R,D})
- Nested combinations of the above
"""

import logging
from collections.abc import Iterator

import pikepdf
from pikepdf import Dictionary, Stream

from ..utils import obj_key
from ..utils import resolve_indirect as _resolve
from ..utils import safe_str as _safe_str

logger = logging.getLogger(__name__)

_APPEARANCE_KEYS = ("/N", "/R", "/D")


def _check_visited(obj: pikepdf.Object, visited: set[tuple[int, int]]) -> bool:
    """Returns True if ``obj`` was seen before, marking it as seen otherwise.

    Direct objects cannot form reference cycles and are never skipped.
    """
    key = obj_key(obj)
    if key is None:
        return False
    if key in visited:
        return True
    visited.add(key)
    return False


def _get_dict(parent: pikepdf.Object, key: str) -> Dictionary | None:
    value = _resolve(parent.get(key))
    if isinstance(value, Dictionary):
        return value
    return None


def iter_page_fonts(
    page: pikepdf.Page | pikepdf.Dictionary,
) -> Iterator[tuple[str, pikepdf.Object]]:
    """Yields every (font_key, font_dict) reachable from a page.

    A font shared by several resource dictionaries is yielded once per
    place it is referenced; callers that resolve fonts should go through a
    ``FontCache`` to avoid duplicate work.

    Args:
        page: A pikepdf Page or page dictionary.

    Yields:
        Tuples of (resource key such as "/F1", dereferenced font dictionary).
    """
    page_obj = page.obj if isinstance(page, pikepdf.Page) else page
    visited: set[tuple[int, int]] = set()

    resources = _get_dict(page_obj, "/Resources")
    if resources is not None:
        yield from _iter_resources(resources, visited)

    yield from _iter_annotations(page_obj, visited)


def _iter_resources(
    resources: Dictionary,
    visited: set[tuple[int, int]],
) -> Iterator[tuple[str, pikepdf.Object]]:
    """Yields fonts of a Resources dictionary and everything nested in it."""
    if _check_visited(resources, visited):
        return

    fonts = _get_dict(resources, "/Font")
    if fonts is not None:
        for font_key in list(fonts.keys()):
            font = _resolve(fonts[font_key])
            if not isinstance(font, Dictionary):
                logger.debug("Skipping non-dictionary font %s", _safe_str(font_key))
                continue
            yield _safe_str(font_key), font

            if _safe_str(font.get("/Subtype", b"")) == "/Type3":
                if _check_visited(font, visited):
                    continue
                type3_resources = _get_dict(font, "/Resources")
                if type3_resources is not None:
                    yield from _iter_resources(type3_resources, visited)

    xobjects = _get_dict(resources, "/XObject")
    if xobjects is not None:
        for xobj_key in list(xobjects.keys()):
            xobj = _resolve(xobjects[xobj_key])
            if not isinstance(xobj, Stream):
                continue
            if _safe_str(xobj.get("/Subtype", b"")) == "/Form":
                yield from _iter_form_xobject(xobj, visited)

    patterns = _get_dict(resources, "/Pattern")
    if patterns is not None:
        for pattern_key in list(patterns.keys()):
            pattern = _resolve(patterns[pattern_key])
            if not isinstance(pattern, (Stream, Dictionary)):
                continue
            try:
                pattern_type = int(pattern.get("/PatternType", 0))
            except (TypeError, ValueError):
                continue
            # Shading patterns (type 2) have no resources
            if pattern_type == 1:
                yield from _iter_form_xobject(pattern, visited)


def _iter_form_xobject(
    xobj: pikepdf.Object,
    visited: set[tuple[int, int]],
) -> Iterator[tuple[str, pikepdf.Object]]:
    """Yields fonts from the Resources of a Form XObject or tiling pattern."""
    if _check_visited(xobj, visited):
        return
    resources = _get_dict(xobj, "/Resources")
    if resources is not None:
        yield from _iter_resources(resources, visited)


def _iter_annotations(
    page_obj: pikepdf.Object,
    visited: set[tuple[int, int]],
) -> Iterator[tuple[str, pikepdf.Object]]:
    """Yields fonts from the appearance streams of a page's annotations.

    Each /AP entry is either a Form XObject or a dictionary of appearance
    states mapping to Form XObjects.
    """
    annots = _resolve(page_obj.get("/Annots"))
    if not isinstance(annots, pikepdf.Array):
        return

    for annot_ref in annots:
        annot = _resolve(annot_ref)
        if not isinstance(annot, Dictionary):
            continue
        ap = _get_dict(annot, "/AP")
        if ap is None:
            continue
        for ap_key in _APPEARANCE_KEYS:
            entry = _resolve(ap.get(ap_key))
            if isinstance(entry, Stream):
                yield from _iter_form_xobject(entry, visited)
            elif isinstance(entry, Dictionary):
                for state in list(entry.keys()):
                    stream = _resolve(entry[state])
                    if isinstance(stream, Stream):
                        yield from _iter_form_xobject(stream, visited)
